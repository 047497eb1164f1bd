# artify/db/models/registry.py
# Importing this module registers every mapped class on Base.metadata.
from artify.db.models.user import Admin, Customer, Editor  # noqa: F401
from artify.db.models.category import Category  # noqa: F401
from artify.db.models.post import Bid, Post  # noqa: F401
from artify.db.models.project import Payment, Project  # noqa: F401
from artify.db.models.document import Document  # noqa: F401
from artify.db.models.feedback import Feedback  # noqa: F401
