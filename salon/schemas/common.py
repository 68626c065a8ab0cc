from pydantic import BaseModel

class Created(BaseModel):
    id: str

class Ok(BaseModel):
    ok: bool = True
