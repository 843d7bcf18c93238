from dorothy.models.user import User
from dorothy.models.event import Event
from dorothy.models.registration import Registration
from dorothy.models.contact import Contact
from dorothy.models.gallery_image import GalleryImage
from dorothy.models.partner import Partner
from dorothy.models.post import Post
from dorothy.models.team_member import TeamMember
from dorothy.models.enums import (
    UserRole,
    Program,
    EventStatus,
    RegistrationStatus,
    RegistrationAction,
    ContactStatus,
    PartnerCategory,
    PostStatus,
    UploadFolder,
)
