from .user import AppUser, PasswordResetCode
from .supplier import Supplier
from .machine import Machine, MachineGroup, MachineCategory
from .accessory import SpecialAccessory, GenericAccessory
from .document import MachineDocument
from .checklist import Checklist, ChecklistItem, ChecklistCompletion, ChecklistItemCompletion
from .ticket import MaintenanceTicket
from .spare_part import SparePart
__all__ = [
    "AppUser", "PasswordResetCode", "Supplier", "Machine", "MachineGroup", "MachineCategory",
    "SpecialAccessory", "GenericAccessory", "MachineDocument", "Checklist", "ChecklistItem",
    "ChecklistCompletion", "ChecklistItemCompletion", "MaintenanceTicket", "SparePart",
]
