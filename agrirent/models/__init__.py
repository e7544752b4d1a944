from agrirent.models.profile import Profile, ROLES, ROLE_FARMER, ROLE_OWNER, ROLE_ADMIN
from agrirent.models.equipment import Equipment, EQUIPMENT_CATEGORIES
from agrirent.models.booking import Booking
from agrirent.models.activity_log import ActivityLog
