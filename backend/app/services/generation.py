from __future__ import annotations

import logging
import os
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from sqlalchemy.orm import Session

from app.core.config import Settings, settings as default_settings
from app.core.errors import AssetMissingError, QuotationError
from app.db.session import SessionLocal
from app.models.document import Document
from app.pdf.document import render_pdf
from app.schemas.quotation import Quotation
from app.services.audit import log_event
from app.services.projection import Projection, project_quotation
from app.services.quotation_document import compose_quotation
from app.services.rates import load_rate_overrides, resolve_for_quotation
from app.utils.timezone import utc_stamp

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"


@dataclass(frozen=True)
class GeneratedDocument:
    record: Document
    content: bytes
    filename: str
    path: Path
    projection: Projection
    mime_type: str = PDF_MIME


def _safe_part(v: str) -> str:
    s = (v or "").strip()
    s = re.sub(r"\s+", "_", s)
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", s)
    s = re.sub(r"_+", "_", s).strip("_")
    return (s[:40] or "unknown")


def document_filename(client_name: str) -> str:
    # timestamp plus a random suffix so two generations never share a name
    return f"Quotation_{_safe_part(client_name)}_{utc_stamp()}_{uuid.uuid4().hex[:8]}.pdf"


def build_quotation_pdf(
    quotation: Quotation,
    overrides: Mapping[int, Sequence] | None = None,
    *,
    settings: Settings | None = None,
) -> tuple[bytes, Projection]:
    """Resolve, project, compose and render. No storage side effects."""
    schedule = resolve_for_quotation(quotation, overrides)
    projection = project_quotation(quotation, schedule)
    doc = compose_quotation(quotation, projection, settings=settings)
    return render_pdf(doc), projection


def write_document_file(directory: str | Path, filename: str, content: bytes) -> Path:
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / filename
    if target.exists():
        raise FileExistsError(str(target))

    tmp = target_dir / f"{filename}.part"
    f = open(tmp, "xb")
    try:
        with f:
            f.write(content)
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return target


def generate_quotation_document(
    s: Session,
    quotation: Quotation,
    *,
    user_id: int | None = None,
    username: str | None = None,
    overrides: Mapping[int, Sequence] | None = None,
    settings: Settings | None = None,
) -> GeneratedDocument:
    settings = settings or default_settings
    if overrides is None:
        overrides = load_rate_overrides(s)

    logger.info(
        "generating %s quotation for %s (term=%s)",
        quotation.product_type.value,
        quotation.client_name,
        quotation.term,
    )

    try:
        content, projection = build_quotation_pdf(quotation, overrides, settings=settings)
    except AssetMissingError as e:
        logging.exception("quotation asset missing", exc_info=e)
        raise

    filename = document_filename(quotation.client_name)
    path = write_document_file(settings.documents_dir, filename, content)

    try:
        row = Document(
            name=filename,
            original_name=filename,
            size=len(content),
            mime_type=PDF_MIME,
            client_id=quotation.client_id,
            user_id=user_id,
        )
        s.add(row)
        s.flush()

        log_event(
            s,
            "document.generate",
            "document",
            row.id,
            user_id=user_id,
            username=username,
            client_id=quotation.client_id,
            details={
                "client_name": quotation.client_name,
                "product_type": quotation.product_type.value,
                "term": quotation.term,
                "size": len(content),
            },
            commit=False,
        )
        s.commit()
        s.refresh(row)
    except Exception as e:
        s.rollback()
        path.unlink(missing_ok=True)
        logging.exception("quotation document store failed", exc_info=e)
        raise

    logger.info("stored quotation document %s (%d bytes)", filename, len(content))
    return GeneratedDocument(
        record=row,
        content=content,
        filename=filename,
        path=path,
        projection=projection,
    )


def generate_quotation_documents(
    quotations: Iterable[Quotation],
    *,
    user_id: int | None = None,
    username: str | None = None,
    settings: Settings | None = None,
    session_factory=SessionLocal,
) -> list[GeneratedDocument]:
    """Batch run on its own session. A rejected quotation is logged and skipped."""
    out: list[GeneratedDocument] = []
    total = 0
    with session_factory() as s:
        overrides = load_rate_overrides(s)
        for q in quotations:
            total += 1
            try:
                out.append(
                    generate_quotation_document(
                        s,
                        q,
                        user_id=user_id,
                        username=username,
                        overrides=overrides,
                        settings=settings,
                    )
                )
            except QuotationError as e:
                logging.exception("quotation generation failed", exc_info=e)
    logger.info("batch generated %d of %d quotations", len(out), total)
    return out
