from dorothy.services.auth_service import AuthService
from dorothy.services.registration_service import RegistrationService
from dorothy.services.stats_service import StatsService
