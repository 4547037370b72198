"""Mappers for converting between stored records and domain models.

Stored issue documents are treated as an untrusted, partially optional
external schema: every field is validated or defaulted explicitly here
before a domain model is built. The same normalizer serves the in-memory
store, the PostgreSQL store and the live feed.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from atlas.domain.model import AppUser, Comment, Issue
from atlas.domain.repository import IssueDocument
from atlas.domain.value import (
    ANONYMOUS_AUTHOR,
    DEFAULT_CATEGORY,
    DEFAULT_USER_NAME,
    CommentId,
    GeoPoint,
    IssueId,
    IssueStatus,
    UserId,
    UserRole,
)


def to_utc_datetime(value: Any) -> Optional[datetime]:
    """Convert a stored timestamp into an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), ISO-8601 strings,
    epoch seconds and provider timestamp objects exposing ``to_datetime()``.

    Args:
        value: Stored timestamp or None

    Returns:
        UTC datetime, or None when the value is absent

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if value is None:
        return None
    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        value = to_datetime()

    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        moment = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def unpack_geo_point(value: Any) -> Dict[str, Any]:
    """Unpack a stored geo-point into latitude/longitude fields.

    Accepts mappings keyed ``latitude/longitude`` or ``lat/lng``, GeoPoint
    values and any object exposing ``latitude``/``longitude`` attributes.

    Raises:
        ValueError: If either coordinate is missing
    """
    if isinstance(value, GeoPoint):
        return value.model_dump()
    if isinstance(value, Mapping):
        latitude = value.get("latitude", value.get("lat"))
        longitude = value.get("longitude", value.get("lng", value.get("lon")))
    else:
        latitude = getattr(value, "latitude", None)
        longitude = getattr(value, "longitude", None)
    if latitude is None or longitude is None:
        raise ValueError("Location must provide latitude and longitude")
    return {"latitude": latitude, "longitude": longitude}


class _StoredRecord(BaseModel):
    """Lenient view over a stored record (snake_case or camelCase keys)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class CommentRecord(_StoredRecord):
    """Stored shape of a comment embedded in an issue."""

    id: str
    content: str = ""
    author: str = ANONYMOUS_AUTHOR
    author_id: str = ""
    author_photo_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "author_photo_url", "authorPhotoUrl", "authorPhotoURL"
        ),
    )
    author_role: UserRole = UserRole.USER
    created_at: Optional[datetime] = None

    @field_validator("author", mode="before")
    @classmethod
    def default_author(cls, v: Any) -> Any:
        return v or ANONYMOUS_AUTHOR

    @field_validator("author_role", mode="before")
    @classmethod
    def parse_role(cls, v: Any) -> Any:
        return v if v in (UserRole.ADMIN, UserRole.ADMIN.value) else UserRole.USER

    @field_validator("created_at", mode="before")
    @classmethod
    def parse_created_at(cls, v: Any) -> Optional[datetime]:
        return to_utc_datetime(v)


class IssueRecord(_StoredRecord):
    """Stored shape of an issue document."""

    title: str = ""
    description: str = ""
    category: str = DEFAULT_CATEGORY
    status: IssueStatus = IssueStatus.RECEIVED
    location: GeoPoint
    address: str = ""
    image_url: Optional[str] = None
    reported_at: Optional[datetime] = None
    reporter: str = ""
    reporter_id: Optional[str] = None
    upvotes: int = 0
    comments: list[CommentRecord] = []

    @field_validator("title", "description", "address", "reporter", mode="before")
    @classmethod
    def none_to_blank(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> Any:
        return v or DEFAULT_CATEGORY

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> IssueStatus:
        return IssueStatus.parse(v)

    @field_validator("location", mode="before")
    @classmethod
    def parse_location(cls, v: Any) -> Dict[str, Any]:
        return unpack_geo_point(v)

    @field_validator("reported_at", mode="before")
    @classmethod
    def parse_reported_at(cls, v: Any) -> Optional[datetime]:
        return to_utc_datetime(v)

    @field_validator("upvotes", mode="before")
    @classmethod
    def default_upvotes(cls, v: Any) -> Any:
        return v or 0

    @field_validator("comments", mode="before")
    @classmethod
    def default_comments(cls, v: Any) -> Any:
        return v or []


def record_to_issue(
    record: Mapping[str, Any], issue_id: str, now: Optional[datetime] = None
) -> Issue:
    """Normalize a stored issue record into an Issue.

    Missing timestamps default to ``now``, missing upvotes to 0 and
    missing comments to an empty collection. Comments come out sorted
    newest first.

    Args:
        record: Raw stored record
        issue_id: Identifier assigned by the store
        now: Reference time for missing timestamps (defaults to current UTC time)

    Returns:
        Issue domain model

    Raises:
        pydantic.ValidationError: If the record is malformed (e.g. no location)
    """
    now = now or datetime.now(timezone.utc)
    parsed = IssueRecord.model_validate(record)

    comments = sorted(
        (
            Comment(
                id=CommentId(c.id),
                content=c.content,
                author=c.author,
                author_id=UserId(c.author_id),
                author_photo_url=c.author_photo_url,
                author_role=c.author_role,
                created_at=c.created_at or now,
            )
            for c in parsed.comments
        ),
        key=lambda c: c.created_at,
        reverse=True,
    )

    return Issue(
        id=IssueId(issue_id),
        title=parsed.title,
        description=parsed.description,
        category=parsed.category,
        status=parsed.status,
        location=parsed.location,
        address=parsed.address,
        image_url=parsed.image_url,
        reported_at=parsed.reported_at or now,
        reporter=parsed.reporter,
        reporter_id=UserId(parsed.reporter_id) if parsed.reporter_id else None,
        upvotes=max(parsed.upvotes, 0),
        comments=tuple(comments),
    )


def document_to_issue(document: IssueDocument, now: Optional[datetime] = None) -> Issue:
    """Normalize a stored document (id + record)."""
    return record_to_issue(document.data, document.id, now=now)


def comment_to_record(comment: Comment) -> Dict[str, Any]:
    """Convert a Comment into its stored shape.

    Args:
        comment: Comment domain model

    Returns:
        Dict suitable for embedding in an issue document
    """
    return {
        "id": comment.id,
        "content": comment.content,
        "author": comment.author,
        "author_id": comment.author_id,
        "author_photo_url": comment.author_photo_url,
        "author_role": comment.author_role.value,
        "created_at": comment.created_at,
    }


def rows_to_issue_document(
    row: Mapping[str, Any], comment_rows: Iterable[Mapping[str, Any]]
) -> IssueDocument:
    """Assemble an issue document from relational rows.

    Args:
        row: ``issues`` table row as dict
        comment_rows: ``comments`` table rows belonging to the issue

    Returns:
        Issue document in the shape the normalizer expects
    """
    data = {
        "title": row.get("title"),
        "description": row.get("description"),
        "category": row.get("category"),
        "status": row.get("status"),
        "location": {"latitude": row["latitude"], "longitude": row["longitude"]},
        "address": row.get("address"),
        "image_url": row.get("image_url"),
        "reported_at": row.get("reported_at"),
        "reporter": row.get("reporter"),
        "reporter_id": row.get("reporter_id"),
        "upvotes": row.get("upvotes"),
        "comments": [dict(c) for c in comment_rows],
    }
    return IssueDocument(id=str(row["id"]), data=data)


def document_to_issue_row(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Flatten a new issue document into ``issues`` table columns.

    Args:
        data: Issue document fields (location as latitude/longitude mapping)

    Returns:
        Dict suitable for database insertion
    """
    location = unpack_geo_point(data["location"])
    row = {
        "title": data.get("title", ""),
        "description": data.get("description", ""),
        "category": data.get("category") or DEFAULT_CATEGORY,
        "status": IssueStatus.parse(data.get("status")).value,
        "latitude": float(location["latitude"]),
        "longitude": float(location["longitude"]),
        "address": data.get("address", ""),
        "image_url": data.get("image_url"),
        "reporter": data.get("reporter", ""),
        "reporter_id": data.get("reporter_id"),
        "upvotes": int(data.get("upvotes") or 0),
    }
    reported_at = to_utc_datetime(data.get("reported_at"))
    if reported_at is not None:
        row["reported_at"] = reported_at
    return row


def row_to_user(row: Mapping[str, Any]) -> AppUser:
    """Convert database row to AppUser domain model.

    Args:
        row: Database row as dict

    Returns:
        AppUser domain model
    """
    return AppUser(
        uid=UserId(row["uid"]),
        email=row.get("email"),
        name=row.get("name") or DEFAULT_USER_NAME,
        photo_url=row.get("photo_url"),
        role=UserRole.ADMIN if row.get("role") == UserRole.ADMIN.value else UserRole.USER,
        created_at=to_utc_datetime(row.get("created_at")) or datetime.now(timezone.utc),
        issues_reported=row.get("issues_reported") or 0,
    )


def user_to_dict(user: AppUser) -> Dict[str, Any]:
    """Convert AppUser domain model to database dict.

    Args:
        user: AppUser domain model

    Returns:
        Dict suitable for database insertion/update
    """
    data = user.model_dump()
    data["role"] = user.role.value
    return data
