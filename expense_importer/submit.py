"""Submission of parsed expenses to the hosted expense API.

Each valid row becomes one ``POST /expenses`` call. Calls run concurrently
under a bounded pool; the batch succeeds only if every call succeeds.

There is no transaction across rows: when one call fails, calls that have
not started yet are cancelled and the failure is raised, but expenses that
were already created stay created. Nothing is retried.
"""

from __future__ import annotations

from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional

import httpx

from expense_importer.logging_setup import get_logger
from expense_importer.models import ExpenseDraft, ImportBatch
from expense_importer.settings import ImporterSettings

logger = get_logger(__name__)


class ExpenseApiError(RuntimeError):
    """A create-expense call was rejected or could not be made."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ImportSubmissionError(RuntimeError):
    """A batch stopped part-way; ``created`` expenses were already saved."""

    def __init__(self, created: int, total: int, cause: Exception) -> None:
        super().__init__(f"Import failed after {created}/{total} expenses were created: {cause}")
        self.created = created
        self.total = total
        self.cause = cause


class ExpenseApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        access_token: Optional[str] = None,
        project_id: Optional[str] = None,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.project_id = project_id
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: ImporterSettings, client: httpx.Client | None = None) -> "ExpenseApiClient":
        return cls(
            settings.api_base_url,
            access_token=settings.access_token,
            project_id=settings.project_id,
            timeout=settings.timeout_seconds,
            client=client,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if self.project_id:
            headers["X-Project-Id"] = self.project_id
        return headers

    def create_expense(self, draft: ExpenseDraft) -> Dict[str, Any]:
        try:
            response = self._client.post(
                f"{self.base_url}/expenses",
                json=draft.to_payload(),
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            raise ExpenseApiError(f"Request to create expense failed: {exc}") from exc

        if response.is_error:
            _raise_for_status(response)

        return response.json().get("expense", {})

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ExpenseApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _raise_for_status(response: httpx.Response) -> None:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = body.get("details") or body.get("error") or "Failed to create expense"
    raise ExpenseApiError(f"{message} (HTTP {response.status_code})", status_code=response.status_code)


def submit_batch(
    batch: ImportBatch,
    client: ExpenseApiClient,
    *,
    concurrency: int = 8,
) -> List[Dict[str, Any]]:
    """Create one expense per valid row and return the created records in row order."""
    if concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    drafts = [ExpenseDraft.from_row(r) for r in batch.valid_rows]
    if not drafts:
        return []

    logger.info("Submitting %d expenses (concurrency=%d)", len(drafts), concurrency)

    pending = iter(enumerate(drafts))
    results: Dict[int, Dict[str, Any]] = {}
    future_to_idx: Dict[Future, int] = {}

    def _submit(pool: ThreadPoolExecutor) -> Optional[Future]:
        try:
            idx, draft = next(pending)
        except StopIteration:
            return None
        fut = pool.submit(client.create_expense, draft)
        future_to_idx[fut] = idx
        return fut

    with ThreadPoolExecutor(max_workers=concurrency) as pool:
        active = set()
        for _ in range(concurrency):
            fut = _submit(pool)
            if fut is None:
                break
            active.add(fut)

        while active:
            done, active = wait(active, return_when=FIRST_COMPLETED)
            failures = []
            for fut in done:
                idx = future_to_idx.pop(fut)
                exc = fut.exception()
                if exc is not None:
                    failures.append((idx, exc))
                else:
                    results[idx] = fut.result()

            if failures:
                # Rows not started yet are never sent; calls in flight settle first.
                finished, _ = wait(active)
                created = len(results) + sum(1 for f in finished if f.exception() is None)
                idx, exc = min(failures, key=lambda f: f[0])
                logger.error("Expense %d failed, %d of %d created: %s", idx + 1, created, len(drafts), exc)
                raise ImportSubmissionError(created, len(drafts), exc) from exc

            for _ in range(len(done)):
                fut = _submit(pool)
                if fut is None:
                    break
                active.add(fut)

    logger.info("Created %d expenses", len(results))
    return [results[i] for i in range(len(drafts))]
