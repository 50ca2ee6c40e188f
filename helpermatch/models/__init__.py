from .user import User
from .employee_profile import EmployeeProfile, Document, Reference
from .employer_profile import EmployerProfile
from .subscription import Subscription, BillingHistory
from .chat import Chat, ChatMessage
from .interview import Interview
from .saved_search import SavedSearch, SearchFilter
