from fastapi import HTTPException, Request, status

from core.firebase import get_firestore_client, verify_id_token

# Standard credentials exception
CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid token",
    headers={"WWW-Authenticate": "Bearer"},
)


# Verifies the Firebase ID Token and Loads the Employee Profile
async def get_current_user(request: Request):

    # 1) Extract & Analyze Authorization Header
    auth_header = request.headers.get("Authorization", "")

    # Make Sure Formatting Valid
    if not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = auth_header.split(" ", 1)[1]

    # 2) Verify This Points to a Real User Account
    try:
        decoded = verify_id_token(token)
    except Exception:
        raise CREDENTIALS_EXCEPTION
    uid = decoded.get("uid")
    if not uid:
        raise CREDENTIALS_EXCEPTION

    # 3) Fetch the Firestore user profile
    snapshot = get_firestore_client().collection("users").document(uid).get()
    if not snapshot.exists:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found",
        )
    profile = snapshot.to_dict()

    return {
        "uid": uid,
        "username": profile.get("username") or profile.get("displayName", ""),
        "email": profile.get("email", decoded.get("email", "")),
    }
