from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from core.deps import get_current_user

router = APIRouter()


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    employee_id: str
    username: str
    email: str


# Get Employee Profile
@router.get("/employee", response_model=EmployeeResponse)
def get_employee(user: dict = Depends(get_current_user)):
    return EmployeeResponse(
        employee_id=user["uid"],
        username=user["username"],
        email=user["email"],
    )
