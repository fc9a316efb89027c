# app/repos/document_store.py
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.document import DocumentModel
from app.utils.logging import get_logger

logger = get_logger(__name__)


class _ServerTimestamp:
    """Znacznik pola - wartosc nadaje magazyn w chwili zapisu, nie klient."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def _resolve(value: Any, now: datetime) -> Any:
    #zamiana znacznika na czas serwera, rekurencyjnie w dict/list
    if value is SERVER_TIMESTAMP:
        return now.isoformat()
    if isinstance(value, dict):
        return {k: _resolve(v, now) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve(v, now) for v in value]
    return value


def _field_equals(field: str, value: Any):
    #porownanie pola dokumentu JSON z wartoscia, typ z wartosci
    column = DocumentModel.data[field]
    if value is None:
        return column.as_string().is_(None)
    if isinstance(value, bool):
        return column.as_boolean() == value
    if isinstance(value, int):
        return column.as_integer() == value
    if isinstance(value, float):
        return column.as_float() == value
    return column.as_string() == str(value)


class CollectionRef:
    def __init__(self, *path: str):
        if not path or len(path) % 2 == 0:
            raise ValueError(f"Niepoprawna sciezka kolekcji: {'/'.join(path)}")
        if any(not p or "/" in p for p in path):
            raise ValueError(f"Niepoprawny segment sciezki: {path}")
        self.segments: Tuple[str, ...] = tuple(path)

    @property
    def path(self) -> str:
        return "/".join(self.segments)

    @property
    def id(self) -> str:
        return self.segments[-1]

    def document(self, doc_id: str | None = None) -> "DocumentRef":
        #bez id -> nowa referencja z losowym id
        return DocumentRef(self, doc_id or uuid.uuid4().hex)

    def __repr__(self) -> str:
        return f"CollectionRef({self.path!r})"


class DocumentRef:
    def __init__(self, collection: CollectionRef, doc_id: str):
        if not doc_id or "/" in doc_id:
            raise ValueError(f"Niepoprawne id dokumentu: {doc_id!r}")
        self.collection = collection
        self.id = doc_id

    @property
    def path(self) -> str:
        return f"{self.collection.path}/{self.id}"

    def __eq__(self, other) -> bool:
        return isinstance(other, DocumentRef) and other.path == self.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"DocumentRef({self.path!r})"


class WriteBatch:
    """
    Atomowy zapis wielu dokumentow.
    set() tylko kolejkuje, commit() zapisuje wszystko w jednej transakcji
    - albo wszystkie dokumenty albo zaden
    """

    def __init__(self, db: Session):
        self.db = db
        self._writes: Dict[str, Tuple[DocumentRef, Dict[str, Any]]] = {}
        self._committed = False

    def set(self, ref: DocumentRef, data: Dict[str, Any]) -> "WriteBatch":
        if self._committed:
            raise RuntimeError("Batch zostal juz zatwierdzony")
        #kolejny set na ten sam dokument nadpisuje poprzedni
        self._writes[ref.path] = (ref, dict(data))
        return self

    def __len__(self) -> int:
        return len(self._writes)

    def commit(self) -> List[DocumentRef]:
        if self._committed:
            raise RuntimeError("Batch zostal juz zatwierdzony")
        self._committed = True

        now = datetime.now(timezone.utc)

        try:
            for ref, data in self._writes.values():
                resolved = _resolve(data, now)
                row = self.db.get(DocumentModel, ref.path)

                if row:
                    row.data = resolved
                    row.updated_at = now
                else:
                    self.db.add(
                        DocumentModel(
                            path=ref.path,
                            collection_path=ref.collection.path,
                            doc_id=ref.id,
                            data=resolved,
                            created_at=now,
                            updated_at=now,
                        )
                    )

            self.db.commit()

        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Batch committed: {len(self._writes)} documents")
        return [ref for ref, _ in self._writes.values()]


class DocumentStore:
    """
    Magazyn dokumentow (kolekcje / dokumenty / batch) na SQLAlchemy.
    Kolekcje moga byc zagniezdzone pod dokumentem, np. users/<id>/orders
    """

    def __init__(self, db: Session):
        self.db = db

    def collection(self, *path: str) -> CollectionRef:
        return CollectionRef(*path)

    def batch(self) -> WriteBatch:
        return WriteBatch(self.db)

    #commands
    def set(self, ref: DocumentRef, data: Dict[str, Any]) -> DocumentRef:
        self.batch().set(ref, data).commit()
        return ref

    def add(self, collection: CollectionRef, data: Dict[str, Any]) -> DocumentRef:
        return self.set(collection.document(), data)

    def delete(self, ref: DocumentRef) -> bool:
        row = self.db.get(DocumentModel, ref.path)
        if not row:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    #query
    def get(self, ref: DocumentRef) -> Dict[str, Any] | None:
        row = self.db.get(DocumentModel, ref.path)
        if not row:
            return None
        return {"id": row.doc_id, **row.data}

    def query(
        self,
        collection: CollectionRef,
        where: Dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> List[Dict[str, Any]]:
        """
        Dokumenty kolekcji; filtr rownosci, sortowanie i limit liczone w bazie.
        Dokumenty bez pola order_by ida na koniec.
        """
        stmt = select(DocumentModel).where(DocumentModel.collection_path == collection.path)

        for field, value in (where or {}).items():
            stmt = stmt.where(_field_equals(field, value))

        if order_by:
            value = DocumentModel.data[order_by].as_string()
            stmt = stmt.order_by(value.is_(None), value.desc() if descending else value)

        stmt = stmt.order_by(DocumentModel.created_at, DocumentModel.path)

        if limit is not None:
            stmt = stmt.limit(limit)

        rows = self.db.execute(stmt).scalars().all()
        return [{"id": r.doc_id, **r.data} for r in rows]
