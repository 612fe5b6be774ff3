"""Typed options accepted by the resource finders.

Callers hand over the nested ``filter`` / ``contain`` / ``order`` map they
received (keys such as ``is-favorite`` or ``permissions.user.profile``);
unknown keys are dropped. A filter, contain or order key counts as requested
when it is present with a non null value, whatever that value is.
"""

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from vault_plane.core.exceptions import InvalidInputException
from vault_plane.core.validation import is_uuid
from vault_plane.models.folder import ROOT_ID


class OptionsModel(BaseModel):
    class Config:
        populate_by_name = True
        extra = "ignore"

    @classmethod
    def create(cls, options: Optional[Mapping[str, Any]] = None):
        """
        Build the options from a raw map.
        Raises InvalidInputException if the map does not validate.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options.model_copy(deep=True)
        if not isinstance(options, Mapping):
            raise InvalidInputException("The options should be a map of filter, contain and order entries.")
        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            raise InvalidInputException(f"The options are not valid: {e.errors()[0]['msg']}") from e


class IndexFilters(OptionsModel):
    has_id: Optional[List[str]] = Field(default=None, alias="has-id")
    is_favorite: Optional[bool] = Field(default=None, alias="is-favorite")
    is_owned_by_me: Optional[Any] = Field(default=None, alias="is-owned-by-me")
    is_shared_with_me: Optional[Any] = Field(default=None, alias="is-shared-with-me")
    is_shared_with_group: Optional[str] = Field(default=None, alias="is-shared-with-group")
    has_parent: Optional[List[str]] = Field(default=None, alias="has-parent")

    @field_validator("has_id", "has_parent", mode="before")
    @classmethod
    def _wrap_single_id(cls, value):
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("has_id")
    @classmethod
    def _has_id_are_uuids(cls, value):
        if value is not None and not all(is_uuid(v) for v in value):
            raise ValueError("The resources identifiers should be valid UUIDs.")
        return value

    @field_validator("has_parent")
    @classmethod
    def _has_parent_are_folder_ids(cls, value):
        if value is not None and not all(v == ROOT_ID or is_uuid(v) for v in value):
            raise ValueError(f"The parent folders identifiers should be valid UUIDs or {ROOT_ID!r}.")
        return value


class IndexContains(OptionsModel):
    permission: Optional[Any] = None
    secret: Optional[Any] = None
    creator: Optional[Any] = None
    modifier: Optional[Any] = None
    favorite: Optional[Any] = None
    permissions_user_profile: Optional[Any] = Field(default=None, alias="permissions.user.profile")
    permissions_group: Optional[Any] = Field(default=None, alias="permissions.group")
    permissions: Optional[Any] = None
    resource_type: Optional[Any] = Field(default=None, alias="resource-type")


class IndexOrder(OptionsModel):
    resources_modified: Optional[Any] = Field(default=None, alias="Resources.modified")


class FindIndexOptions(OptionsModel):
    filter: IndexFilters = Field(default_factory=IndexFilters)
    contain: IndexContains = Field(default_factory=IndexContains)
    order: IndexOrder = Field(default_factory=IndexOrder)

    # set by the finder, available to extensions
    user_id: Optional[str] = None


class UpgradeFilters(OptionsModel):
    is_shared: Optional[bool] = Field(default=None, alias="is-shared")


class UpgradeContains(OptionsModel):
    permissions: Optional[bool] = None


class MetadataUpgradeOptions(OptionsModel):
    filter: UpgradeFilters = Field(default_factory=UpgradeFilters)
    contain: UpgradeContains = Field(default_factory=UpgradeContains)
