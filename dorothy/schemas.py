"""Request body schemas.

Create schemas declare required fields and defaults. Update schemas accept
any subset of fields: omitted fields keep their stored value, and an explicit
``null`` is only accepted where the column is nullable.
"""
from datetime import date
from typing import Annotated, List, Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
)

from dorothy.models.enums import (
    ContactStatus,
    EventStatus,
    PartnerCategory,
    PostStatus,
    Program,
    UploadFolder,
)


def _date_part(value):
    # Accept full ISO datetimes from the date pickers.
    if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
        return value[:10]
    return value


def _upper(value):
    return value.upper() if isinstance(value, str) else value


# Categories used by the admin team screens.
TEAM_CATEGORY_MAP = {
    "seniors": "SENIORS",
    "reeap": "REEAP",
    "laep": "LAEP",
    "jeunesse": "JEUNESSE",
    "direction": "GENERAL",
    "general": "GENERAL",
    "acces_droits": "ACCES_DROITS",
    "anime_quartier": "ANIME_QUARTIER",
}


def _team_category(value):
    if isinstance(value, str):
        return TEAM_CATEGORY_MAP.get(value, value.upper())
    return value


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
# Passwords are hashed as typed, surrounding spaces included.
Password = Annotated[str, StringConstraints(strip_whitespace=False, min_length=6)]
PositiveInt = Annotated[int, Field(gt=0)]
EventDate = Annotated[date, BeforeValidator(_date_part)]
ProgramField = Annotated[Program, BeforeValidator(_upper)]
TeamCategoryField = Annotated[Program, BeforeValidator(_team_category)]
EventStatusField = Annotated[EventStatus, BeforeValidator(_upper)]
PostStatusField = Annotated[PostStatus, BeforeValidator(_upper)]
ContactStatusField = Annotated[ContactStatus, BeforeValidator(_upper)]
PartnerCategoryField = Annotated[PartnerCategory, BeforeValidator(_upper)]


class Schema(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        use_enum_values=True,
        populate_by_name=True,
        extra="ignore",
    )

    def to_attrs(self):
        """Only the fields present in the request body."""
        return self.model_dump(exclude_unset=True)


class CreateSchema(Schema):
    def to_attrs(self):
        # Defaults are part of a new row.
        return self.model_dump()


# Auth


class LoginSchema(Schema):
    email: EmailStr
    password: Password

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return value.lower()


class RegisterAdminSchema(Schema):
    email: EmailStr
    password: Password
    name: NonEmptyStr = "Admin"

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return value.lower()


# Events


class EventCreateSchema(CreateSchema):
    title: NonEmptyStr
    description: NonEmptyStr
    content: Optional[str] = ""
    date: EventDate
    time: Optional[str] = None
    location: NonEmptyStr
    image_url: Optional[str] = None
    category: ProgramField
    status: EventStatusField = EventStatus.DRAFT.value
    featured: bool = False
    max_participants: Optional[PositiveInt] = None
    tags: List[str] = Field(default_factory=list)


class EventUpdateSchema(Schema):
    title: NonEmptyStr = None
    description: NonEmptyStr = None
    content: Optional[str] = None
    date: EventDate = None
    time: Optional[str] = None
    location: NonEmptyStr = None
    image_url: Optional[str] = None
    category: ProgramField = None
    status: EventStatusField = None
    featured: bool = None
    max_participants: Optional[PositiveInt] = None
    tags: List[str] = None


# Registrations


class RegistrationCreateSchema(CreateSchema):
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    email: EmailStr
    phone: NonEmptyStr
    message: Optional[str] = None
    event_id: PositiveInt

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return value.lower()

    @field_validator("message")
    @classmethod
    def blank_message(cls, value):
        return value or None


class RegistrationPatchSchema(Schema):
    # Admins can only approve or reject.
    status: Literal["CONFIRMED", "CANCELLED"]


# Contacts


class ContactCreateSchema(CreateSchema):
    name: NonEmptyStr
    email: EmailStr
    phone: Optional[str] = None
    subject: NonEmptyStr
    message: NonEmptyStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value):
        return value.lower()

    @field_validator("phone")
    @classmethod
    def blank_phone(cls, value):
        return value or None


class ContactPatchSchema(Schema):
    status: ContactStatusField


# Gallery


class GalleryCreateSchema(CreateSchema):
    title: Optional[str] = None
    description: Optional[str] = None
    filename: Optional[str] = None
    url: NonEmptyStr
    category: Optional[ProgramField] = None
    tags: List[str] = Field(default_factory=list)
    size: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None


class GalleryUpdateSchema(Schema):
    title: Optional[str] = None
    description: Optional[str] = None
    filename: Optional[str] = None
    url: NonEmptyStr = None
    category: Optional[ProgramField] = None
    tags: List[str] = None
    size: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None


# Partners


class PartnerCreateSchema(CreateSchema):
    name: NonEmptyStr
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    category: PartnerCategoryField
    active: bool = True
    sort_order: int = 0


class PartnerUpdateSchema(Schema):
    name: NonEmptyStr = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    category: PartnerCategoryField = None
    active: bool = None
    sort_order: int = None


# Posts


class PostCreateSchema(CreateSchema):
    title: NonEmptyStr
    content: NonEmptyStr
    excerpt: Optional[str] = None
    category: ProgramField
    status: PostStatusField = PostStatus.DRAFT.value
    image_url: Optional[str] = None
    featured: bool = False
    tags: List[str] = Field(default_factory=list)


class PostUpdateSchema(Schema):
    title: NonEmptyStr = None
    content: NonEmptyStr = None
    excerpt: Optional[str] = None
    category: ProgramField = None
    status: PostStatusField = None
    image_url: Optional[str] = None
    featured: bool = None
    tags: List[str] = None


# Team


class TeamCreateSchema(CreateSchema):
    """Accepts both column names and the admin screen names (role, imageUrl, ...)."""

    name: NonEmptyStr
    position: NonEmptyStr = Field(validation_alias=AliasChoices("position", "role"))
    category: TeamCategoryField = Program.GENERAL.value
    bio: Optional[str] = None
    image_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("image_url", "imageUrl")
    )
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    active: bool = Field(True, validation_alias=AliasChoices("active", "isActive"))
    sort_order: int = Field(0, validation_alias=AliasChoices("sort_order", "order"))


class TeamUpdateSchema(Schema):
    name: NonEmptyStr = None
    position: NonEmptyStr = Field(
        None, validation_alias=AliasChoices("position", "role")
    )
    category: TeamCategoryField = None
    bio: Optional[str] = None
    image_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("image_url", "imageUrl")
    )
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    active: bool = Field(None, validation_alias=AliasChoices("active", "isActive"))
    sort_order: int = Field(None, validation_alias=AliasChoices("sort_order", "order"))


# Uploads


class UploadSchema(CreateSchema):
    folder: UploadFolder = UploadFolder.GALLERY.value
