from pydantic import BaseModel


class Course(BaseModel):
    id: str
    title: str
    description: str
    duration: str
    fees: float
    instructor: str
    image_url: str
