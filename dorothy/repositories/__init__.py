from dorothy.repositories.user_repository import UserRepository
from dorothy.repositories.event_repository import EventRepository
from dorothy.repositories.registration_repository import RegistrationRepository
from dorothy.repositories.contact_repository import ContactRepository
from dorothy.repositories.gallery_repository import GalleryRepository
from dorothy.repositories.partner_repository import PartnerRepository
from dorothy.repositories.post_repository import PostRepository
from dorothy.repositories.team_repository import TeamRepository
