from pydantic import AliasChoices, BaseModel, ConfigDict, Field

class UserBase(BaseModel):
    first_name: str = ""
    last_name: str = ""

class UserCreate(UserBase):
    model_config = ConfigDict(strict=True)

class UserOut(UserBase):
    id: int
    model_config = ConfigDict(from_attributes=True)

class BookOut(BaseModel):
    # stored as title/quantity, served under the historical keys
    id: int
    book_name: str = Field(validation_alias=AliasChoices("title", "book_name"))
    book_quantity: int = Field(validation_alias=AliasChoices("quantity", "book_quantity"))
    model_config = ConfigDict(from_attributes=True)

class BorrowRequest(BaseModel):
    # "5" is not a valid id
    model_config = ConfigDict(strict=True)
    user_id: int = 0
    book_id: int = 0

class StatusOut(BaseModel):
    status: str
