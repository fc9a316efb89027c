#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.user import UserModel
from app.data.models.document import DocumentModel

__all__ = ["UserModel", "DocumentModel"]
