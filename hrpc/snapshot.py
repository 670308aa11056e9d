"""Calls creating, checking, listing, restoring and deleting snapshots."""

from __future__ import annotations

from typing import Optional

from .call import Call, Option, apply_options
from .messages import (
    GetCompletedSnapshotsRequest,
    Response,
    SnapshotDescription,
    SnapshotRequest,
    SnapshotType,
)


class Snapshot(Call):
    """Takes a snapshot of a table."""

    def __init__(self, snapshot_name: str, table: str, *args: Option) -> None:
        super().__init__(table.encode(), b"")
        self.snapshot_name = snapshot_name
        self.table_name = table
        self.snapshot_type: Optional[SnapshotType] = None
        self.version = 0
        self.owner = ""
        apply_options(self, *args)

    def name(self) -> str:
        return "Snapshot"

    def description(self) -> str:
        return Snapshot.name(self)

    def describe(self) -> SnapshotDescription:
        """Build the description of this snapshot."""
        return SnapshotDescription(
            type=self.snapshot_type,
            table=self.table_name,
            name=self.snapshot_name,
            version=self.version,
            owner=self.owner,
        )

    def to_proto(self) -> SnapshotRequest:
        return SnapshotRequest(snapshot=self.describe())

    def new_response(self) -> Response:
        return Response(kind="SnapshotResponse")


class SnapshotDone(Snapshot):
    """Checks whether a snapshot has completed."""

    def name(self) -> str:
        return "IsSnapshotDone"

    def new_response(self) -> Response:
        return Response(kind="IsSnapshotDoneResponse")


class DeleteSnapshot(Snapshot):
    """Deletes a snapshot."""

    def name(self) -> str:
        return "DeleteSnapshot"

    def new_response(self) -> Response:
        return Response(kind="DeleteSnapshotResponse")


class RestoreSnapshot(Snapshot):
    """Restores a table from a snapshot."""

    def name(self) -> str:
        return "RestoreSnapshot"

    def new_response(self) -> Response:
        return Response(kind="RestoreSnapshotResponse")


class RestoreSnapshotDone(Snapshot):
    """Checks whether restoring a snapshot has completed."""

    def name(self) -> str:
        return "IsRestoreSnapshotDone"

    def new_response(self) -> Response:
        return Response(kind="IsRestoreSnapshotDoneResponse")


class ListSnapshots(Call):
    """Lists all completed snapshots."""

    def __init__(self) -> None:
        super().__init__(b"", b"")

    def name(self) -> str:
        return "GetCompletedSnapshots"

    def to_proto(self) -> GetCompletedSnapshotsRequest:
        return GetCompletedSnapshotsRequest()

    def new_response(self) -> Response:
        return Response(kind="GetCompletedSnapshotsResponse")


def _snapshot(call: Call, option_name: str) -> Snapshot:
    if not isinstance(call, Snapshot):
        raise ValueError(f"'{option_name}' option can only be used with Snapshot queries")
    return call


def snapshot_version(version: int) -> Option:
    """Set the version of the snapshot."""

    def apply(call: Call) -> None:
        _snapshot(call, "SnapshotVersion").version = version

    return apply


def snapshot_owner(owner: str) -> Option:
    """Set the owner of the snapshot."""

    def apply(call: Call) -> None:
        _snapshot(call, "SnapshotOwner").owner = owner

    return apply


def snapshot_skip_flush() -> Option:
    """Take the snapshot without flushing memstores first."""

    def apply(call: Call) -> None:
        _snapshot(call, "SnapshotSkipFlush").snapshot_type = SnapshotType.SKIPFLUSH

    return apply