import logging
import os

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shortlinks import codes, models, schemas
from shortlinks.errors import Conflict, ExhaustedRetries, InvalidInput, NotFound

logger = logging.getLogger("shortlinks.crud")

GENERATED_CODE_LENGTH = 6
MAX_CODE_ATTEMPTS = int(os.getenv("CODE_MAX_ATTEMPTS", 10))

# Top-level paths owned by the app itself; never valid as link codes
RESERVED = frozenset({"api", "code", "healthz"})

def code_exists(db: Session, code: str) -> bool:
    return db.query(models.Link.id).filter(models.Link.code == code).first() is not None

def _unused_code(db: Session, max_attempts: int) -> str:
    for attempt in range(1, max_attempts + 1):
        code = codes.generate_code(GENERATED_CODE_LENGTH)
        if not code_exists(db, code):
            return code
        logger.debug("Generated code %s already taken (attempt %d)", code, attempt)
    raise ExhaustedRetries()

def create_link(
    db: Session, link_in: schemas.LinkCreate, max_attempts: int = MAX_CODE_ATTEMPTS
) -> models.Link:
    target_url = (link_in.target_url or "").strip()
    if not codes.validate_url(target_url):
        raise InvalidInput("Invalid URL")

    code = (link_in.code or "").strip()
    if code:
        if not codes.validate_code(code) or code in RESERVED:
            raise InvalidInput("Code must be 6-8 alphanumeric characters")
        if code_exists(db, code):
            raise Conflict()
    else:
        code = _unused_code(db, max_attempts)

    link = models.Link(code=code, target_url=target_url, total_clicks=0)
    db.add(link)
    try:
        db.commit()
    except IntegrityError:
        # Lost the race between the existence check and the insert
        db.rollback()
        raise Conflict()
    db.refresh(link)
    logger.info("Created link %s -> %s", code, target_url)
    return link

def get_link(db: Session, code: str) -> models.Link:
    link = db.query(models.Link).filter_by(code=code).first()
    if not link:
        raise NotFound()
    return link

def list_links(db: Session, search: str | None = None) -> list[models.Link]:
    query = db.query(models.Link)
    if search:
        query = query.filter(
            or_(
                models.Link.code.icontains(search, autoescape=True),
                models.Link.target_url.icontains(search, autoescape=True),
            )
        )
    return query.order_by(models.Link.created_at.desc(), models.Link.id.desc()).all()

def delete_link(db: Session, code: str) -> None:
    deleted = db.query(models.Link).filter_by(code=code).delete(synchronize_session=False)
    db.commit()
    if not deleted:
        raise NotFound()
    logger.info("Deleted link %s", code)

def record_click(db: Session, code: str) -> bool:
    """Bump the click counter in the store, not from a loaded copy."""
    updated = (
        db.query(models.Link)
        .filter_by(code=code)
        .update(
            {
                models.Link.total_clicks: models.Link.total_clicks + 1,
                models.Link.last_clicked: models.utcnow(),
            },
            synchronize_session=False,
        )
    )
    db.commit()
    return bool(updated)

def redirect_and_track(db: Session, code: str) -> str:
    """Resolve a code to its target URL and count the click.

    Click tracking is best effort: once the lookup succeeds, a failed
    update is logged and the target is still returned.
    """
    target_url = get_link(db, code).target_url
    try:
        record_click(db, code)
    except Exception:
        db.rollback()
        logger.exception("Failed to increment click for %s", code)
    return target_url
