# Imports every model module so relationship() string targets resolve
# and Base.metadata knows all tables.

from ticketing.modules.departments.models import Department
from ticketing.modules.teams.models import Team
from ticketing.modules.categories.models import TicketCategory
from ticketing.modules.priorities.models import TicketPriority
from ticketing.modules.statuses.models import TicketStatus
from ticketing.modules.users.models import User, Role, UserRole
from ticketing.modules.faq.models import FAQCategory, FAQItem
from ticketing.modules.tickets.models import Ticket, TicketComment, TicketAttachment, TicketFeedback

__all__ = [
    "Department", "Team", "TicketCategory", "TicketPriority", "TicketStatus",
    "User", "Role", "UserRole", "FAQCategory", "FAQItem",
    "Ticket", "TicketComment", "TicketAttachment", "TicketFeedback",
]
