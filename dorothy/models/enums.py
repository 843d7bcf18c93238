from enum import Enum


class UserRole(Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class Program(Enum):
    SENIORS = "SENIORS"
    REEAP = "REEAP"
    LAEP = "LAEP"
    JEUNESSE = "JEUNESSE"
    ACCES_DROITS = "ACCES_DROITS"
    ANIME_QUARTIER = "ANIME_QUARTIER"
    GENERAL = "GENERAL"


class EventStatus(Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"


class RegistrationStatus(Enum):
    PENDING = "PENDING"
    EMAIL_CONFIRMED = "EMAIL_CONFIRMED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class ContactStatus(Enum):
    NEW = "NEW"
    READ = "READ"
    REPLIED = "REPLIED"
    ARCHIVED = "ARCHIVED"


class PartnerCategory(Enum):
    INSTITUTIONAL = "INSTITUTIONAL"
    ASSOCIATIF = "ASSOCIATIF"
    PRIVE = "PRIVE"


class PostStatus(Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class UploadFolder(Enum):
    GALLERY = "gallery"
    EVENTS = "events"
    TEAM = "team"


class RegistrationAction(Enum):
    CONFIRM_EMAIL = "confirm_email"
    APPROVE = "approve"
    CANCEL = "cancel"
