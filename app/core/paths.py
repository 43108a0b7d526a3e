"""Collection and document paths the record store is laid out by."""
from app.core.enums import RecordKind

STUDENTS = "students"
CLASSES = "classes"
ANNOUNCEMENTS = "announcements"
FEES = "fees"
ACADEMIC_RESULTS = "academicResults"
ADMIN_GRANTS = "roles_admin"
SITE_CONTENT = "site_content"
HOMEPAGE_DOC_ID = "homepage"

_COLLECTION_FOR_KIND = {
    RecordKind.FEE: FEES,
    RecordKind.RESULT: ACADEMIC_RESULTS,
}


def collection_for(kind: RecordKind) -> str:
    """Name of the sub-collection and of the global flat collection for a record kind."""
    return _COLLECTION_FOR_KIND[RecordKind(kind)]


def student_doc(uid: str) -> str:
    return f"{STUDENTS}/{uid}"


def scoped_collection(uid: str, kind: RecordKind) -> str:
    return f"{STUDENTS}/{uid}/{collection_for(kind)}"


def scoped_record(uid: str, kind: RecordKind, record_id: str) -> str:
    return f"{scoped_collection(uid, kind)}/{record_id}"


def global_record(kind: RecordKind, record_id: str) -> str:
    return f"{collection_for(kind)}/{record_id}"


def admin_grant_doc(uid: str) -> str:
    return f"{ADMIN_GRANTS}/{uid}"


def class_doc(class_id: str) -> str:
    return f"{CLASSES}/{class_id}"


def announcement_doc(announcement_id: str) -> str:
    return f"{ANNOUNCEMENTS}/{announcement_id}"


def site_content_doc() -> str:
    return f"{SITE_CONTENT}/{HOMEPAGE_DOC_ID}"


def split_path(path: str) -> tuple:
    """Split a document path into (collection, doc_id). Raises ValueError for collection paths."""
    segments = [s for s in path.strip("/").split("/") if s]
    if not segments or len(segments) % 2 != 0:
        raise ValueError(f"Not a document path: {path!r}")
    return "/".join(segments[:-1]), segments[-1]
