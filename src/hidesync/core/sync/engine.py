"""
Sync engine: the single owner of the document, credentials, and status.

The engine keeps the authoritative state in memory, writes every change
through to a KeyValueStore, and mirrors the document to a GitHub gist:

- Local changes schedule a debounced push (local overwrites remote).
- Startup and connection validation pull (remote overwrites local).
- Remote and parse failures never propagate; they land in
  ``SyncStatus.last_error`` and local reads/writes keep working offline.

All operations are coroutines meant to run on one event loop. In-memory
mutations happen between awaits, so they never interleave partially.

Example:
    >>> engine = SyncEngine(MemoryStore(), config=HideSyncConfig())
    >>> await engine.ensure_ready()
    >>> site = await engine.hide_thread("example.test", ThreadRef(thread_id="1", board_id="b"))
    >>> await engine.close(flush=True)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from hidesync.core.config.models import HideSyncConfig
from hidesync.core.document.models import Document, SiteState, ThreadRef, utc_now
from hidesync.core.document.store import DocumentStore
from hidesync.core.exceptions import (
    ConnectionValidationError,
    DocumentParseError,
    RemoteError,
    RemoteStatusError,
)
from hidesync.core.gist.client import GistClient
from hidesync.core.storage.backend import AUTH_KEY, DATA_KEY, STATUS_KEY, KeyValueStore
from hidesync.core.sync.debounce import Debouncer
from hidesync.core.sync.models import Credentials, SyncStatus, ValidationResult

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class SyncEngine:
    """
    Local-first synchronizer for the hidden-thread document.

    Construct one per process and pass it explicitly to whatever serves
    commands (see CommandDispatcher). Call start() or ensure_ready() before
    issuing commands; close() before discarding it.

    Attributes:
        config: Engine configuration
        storage: Durable key/value store written through on every change
        client: Gist API client
        documents: In-memory document store
        credentials: Current token and gist binding
        status: Current user-visible status
    """

    def __init__(
        self,
        storage: KeyValueStore,
        client: GistClient | None = None,
        config: HideSyncConfig | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize the engine. No I/O happens until start().

        Args:
            storage: Persistence backend
            client: Gist client (built from config if omitted)
            config: Configuration (defaults if omitted)
            clock: Source of timestamps
        """
        self.config = config or HideSyncConfig()
        self.storage = storage
        self.client = client or GistClient(
            self.config.api_base_url,
            filename=self.config.gist_filename,
            description=self.config.gist_description,
            timeout=self.config.request_timeout,
        )
        self.documents = DocumentStore(
            board_limit=self.config.board_limit,
            profile_name=self.config.default_profile,
            clock=clock,
        )
        self.credentials = Credentials()
        self.status = SyncStatus()
        self._clock = clock
        self._debouncer = Debouncer(
            self.config.debounce_seconds, self.push_remote_state, name="gist push"
        )
        self._push_lock = asyncio.Lock()
        self._container_lock = asyncio.Lock()
        self._init_task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def ready(self) -> bool:
        """True once the latest initialization finished successfully."""
        task = self._init_task
        return (
            task is not None
            and task.done()
            and not task.cancelled()
            and task.exception() is None
        )

    @property
    def push_pending(self) -> bool:
        """True while a debounced push is armed."""
        return self._debouncer.pending

    def start(self) -> asyncio.Task[None]:
        """
        Trigger (re)initialization: load state and reconcile with the remote.

        A new trigger waits for any in-flight initialization before running,
        never cancels it, and becomes the one later callers wait on.

        Returns:
            The initialization task
        """
        previous = self._init_task
        self._init_task = asyncio.ensure_future(self._initialize_after(previous))
        return self._init_task

    async def ensure_ready(self) -> None:
        """
        Wait for the current initialization, starting one if needed.

        A previous initialization that failed (for example on an unreadable
        state file) is retried instead of re-raising its old error forever.
        """
        task = self._init_task
        if task is None or (task.done() and not self.ready):
            task = self.start()
        # Shield so a cancelled caller doesn't abort initialization for everyone
        await asyncio.shield(task)

    async def _initialize_after(self, previous: asyncio.Task[None] | None) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait({previous})
        await self.initialize()

    async def initialize(self) -> None:
        """
        Load persisted state, then pull if a token is configured.

        Without a token sync is marked disabled and any stale error cleared.
        Pull failures are recorded in the status, never raised.
        """
        logger.debug("Initializing sync engine")
        empty = Document.empty(self.config.default_profile)
        self.documents.replace(await self._load(DATA_KEY, Document, empty))
        self.status = await self._load(STATUS_KEY, SyncStatus, SyncStatus())
        self.credentials = await self._load(AUTH_KEY, Credentials, Credentials())

        if self.credentials.token:
            await self.pull_remote_state()
        else:
            self.status.sync_enabled = False
            self.status.last_error = None
            await self._persist_status()
        logger.debug("Sync engine ready (sync enabled: %s)", self.status.sync_enabled)

    async def close(self, *, flush: bool = False) -> None:
        """
        Stop background activity.

        Args:
            flush: Push immediately if a debounced push is pending instead
                of dropping it
        """
        if flush:
            await self._debouncer.flush()
        else:
            self._debouncer.cancel()
        await self._debouncer.wait_idle()

    async def _load(self, key: str, model: type[M], default: M) -> M:
        raw = await self.storage.get(key)
        if raw is None:
            return default
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            logger.warning("Ignoring unreadable %s record: %s", key, e)
            return default

    # ------------------------------------------------------------------
    # Document operations
    # ------------------------------------------------------------------

    async def get_site_state(self, domain: str) -> SiteState:
        """
        Get a site's hidden threads, creating (and persisting) an empty site.

        Returns:
            A copy of the site's state
        """
        created = not self.documents.has_site(domain)
        site = self.documents.site_state(domain).model_copy(deep=True)
        if created:
            await self._persist_data()
        return site

    async def hide_thread(self, domain: str, ref: ThreadRef) -> SiteState:
        """Hide a thread, persist, and schedule a push."""
        site = self.documents.hide(domain, ref).model_copy(deep=True)
        logger.debug("Hid %s/%s on %s", ref.board_id, ref.thread_id, domain)
        await self._persist_data()
        await self._schedule_push()
        return site

    async def unhide_thread(self, domain: str, ref: ThreadRef) -> SiteState:
        """Unhide a thread, persist, and schedule a push."""
        site = self.documents.unhide(domain, ref).model_copy(deep=True)
        logger.debug("Unhid %s/%s on %s", ref.board_id, ref.thread_id, domain)
        await self._persist_data()
        await self._schedule_push()
        return site

    # ------------------------------------------------------------------
    # Credentials and status
    # ------------------------------------------------------------------

    def get_status(self) -> SyncStatus:
        """Copy of the current status."""
        return self.status.model_copy()

    async def set_token(self, token: str | None) -> SyncStatus:
        """
        Replace the stored token. The gist binding is kept.

        Clearing the token disables sync and drops any pending push.
        """
        token = (token or "").strip() or None
        self.credentials.token = token
        await self._persist_auth()
        if token is None:
            self._debouncer.cancel()
            self.status.sync_enabled = False
            self.status.last_error = None
            await self._persist_status()
            logger.info("Token cleared, sync disabled")
        return self.get_status()

    async def validate_connection(self, token: str | None) -> ValidationResult:
        """
        Store a token, check it against the API, provision the gist, and pull.

        Returns:
            The gist binding

        Raises:
            ConnectionValidationError: If the token is missing or rejected,
                or the gist can't be created
        """
        if not token or not token.strip():
            raise ConnectionValidationError("Token is not set")

        await self.set_token(token)
        token = self.credentials.token
        assert token is not None

        try:
            await self.client.get_user(token)
        except RemoteStatusError as e:
            raise ConnectionValidationError(
                f"Token rejected: {e.status_code}", status_code=e.status_code
            ) from e
        except RemoteError as e:
            raise ConnectionValidationError(str(e)) from e

        try:
            await self._ensure_container(token)
        except RemoteError as e:
            raise ConnectionValidationError(str(e)) from e

        await self.pull_remote_state()
        return ValidationResult(remote_container_id=self.credentials.remote_container_id)

    # ------------------------------------------------------------------
    # Remote reconciliation
    # ------------------------------------------------------------------

    async def pull_remote_state(self) -> None:
        """
        Replace the local document with the gist's content.

        No-op without a token or gist. A gist lacking the sync file is seeded
        with the local document instead. Failures only update last_error.
        """
        token = self.credentials.token
        gist_id = self.credentials.remote_container_id
        if not token or not gist_id:
            return

        try:
            text = await self.client.fetch_file(token, gist_id)
        except RemoteError as e:
            logger.warning("Failed to pull from gist %s: %s", gist_id, e)
            await self._record_error(str(e))
            return

        if text is None:
            logger.info("Gist %s has no sync file, seeding it from local state", gist_id)
            await self.push_remote_state()
            return

        try:
            document = Document.from_json(text)
        except DocumentParseError as e:
            logger.warning("Failed to parse gist %s: %s", gist_id, e)
            await self._record_error(str(e))
            return

        self.documents.replace(document)
        self.status.last_sync = self._clock()
        self._mark_enabled(token)
        self.status.last_error = None
        self.status.remote_container_id = gist_id
        await self._persist_data()
        await self._persist_status()
        logger.debug("Pulled document from gist %s", gist_id)

    async def push_remote_state(self) -> None:
        """
        Overwrite the gist with the full local document.

        No-op without a token. Creates the gist on first use. Pushes are
        serialized; failures only update last_error.
        """
        async with self._push_lock:
            token = self.credentials.token
            if not token:
                return

            try:
                gist_id = await self._ensure_container(token)
                await self.client.update_file(token, gist_id, self.documents.document.to_json())
            except RemoteError as e:
                logger.warning("Failed to push to gist: %s", e)
                await self._record_error(str(e))
                return

            self.status.last_sync = self._clock()
            self._mark_enabled(token)
            self.status.last_error = None
            await self._persist_status()
            logger.debug("Pushed document to gist %s", gist_id)

    async def sync_now(self) -> SyncStatus:
        """Cancel any pending push and push immediately."""
        self._debouncer.cancel()
        await self.push_remote_state()
        return self.get_status()

    async def _ensure_container(self, token: str) -> str:
        async with self._container_lock:
            if self.credentials.remote_container_id:
                return self.credentials.remote_container_id

            gist_id = await self.client.create_gist(token, self.documents.document.to_json())
            self.credentials.remote_container_id = gist_id
            self.status.remote_container_id = gist_id
            self._mark_enabled(token)
            self.status.last_error = None
            await self._persist_auth()
            await self._persist_status()
            return gist_id

    def _mark_enabled(self, token: str) -> None:
        # A token cleared or replaced while the request was in flight keeps
        # whatever sync_enabled value set_token() left behind
        if self.credentials.token == token:
            self.status.sync_enabled = True

    async def _schedule_push(self) -> None:
        if not self.credentials.token:
            self.status.sync_enabled = False
            await self._persist_status()
            return
        self._debouncer.schedule()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def _record_error(self, message: str) -> None:
        self.status.last_error = message
        await self._persist_status()

    async def _persist_data(self) -> None:
        await self.storage.set(DATA_KEY, self.documents.document.model_dump(mode="json"))

    async def _persist_auth(self) -> None:
        await self.storage.set(AUTH_KEY, self.credentials.to_record())

    async def _persist_status(self) -> None:
        await self.storage.set(STATUS_KEY, self.status.to_record())
