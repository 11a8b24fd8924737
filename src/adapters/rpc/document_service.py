"""
Document service client over the agent JSON-RPC endpoint.

Implements DocumentServicePort. Operations queued on a DocumentHandle are sent
as one JSON-RPC batch by ``submit``; ``fetch_document`` is sent immediately
because the handle is built from its result.

Wire format (request): a JSON list of ``{"id", "method", "params"}``.
Wire format (response): a JSON list of ``{"id", "data"}`` or
``{"id", "error": {"message"}}``. The id of a newly created document is
``data.waveId`` of the first response.
"""

from __future__ import annotations

import logging
import secrets
from html import escape
from typing import Any

import httpx

from src.ports.documents import DocumentHandle, RpcError

logger = logging.getLogger(__name__)

PROVISIONAL_PREFIX = "TBD_"
DEFAULT_COLLECTION_ID = "conv+root"


def _provisional_id(domain: str) -> str:
    return f"{domain}!{PROVISIONAL_PREFIX}{secrets.token_hex(6)}"


def _extract_error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text if text else response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("error") or body.get("detail")
        if isinstance(detail, dict):
            return str(detail.get("message", detail))
        if detail is not None:
            return str(detail)
    return str(body)


class RobotRpcSession:
    """Document operations authenticated as one agent account."""

    def __init__(self, client: httpx.Client, rpc_url: str, auth: httpx.Auth) -> None:
        self._client = client
        self._rpc_url = rpc_url
        self._auth = auth
        self._op_counter = 0

    def _next_op_id(self) -> str:
        self._op_counter += 1
        return f"op{self._op_counter}"

    def _op(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        return {"id": self._next_op_id(), "method": method, "params": params}

    def _post(self, operations: list[dict[str, Any]]) -> list[dict[str, Any]]:
        method = operations[0]["method"] if operations else None
        try:
            response = self._client.post(self._rpc_url, json=operations, auth=self._auth)
        except httpx.HTTPError as e:
            raise RpcError(f"POST {self._rpc_url} failed: {e}", method=method) from e

        if response.is_error:
            detail = _extract_error_detail(response)
            raise RpcError(
                f"POST {self._rpc_url} -> {response.status_code}: {detail}", method=method
            )

        try:
            body = response.json()
        except ValueError as e:
            raise RpcError(f"Malformed RPC response from {self._rpc_url}", method=method) from e

        if isinstance(body, dict):
            body = [body]
        if not isinstance(body, list):
            raise RpcError(f"Unexpected RPC response shape: {type(body).__name__}", method=method)
        if operations and not body:
            raise RpcError(
                f"Malformed RPC response from {self._rpc_url}: empty batch", method=method
            )

        for item in body:
            if not isinstance(item, dict):
                raise RpcError(
                    f"Malformed RPC response from {self._rpc_url}: item is "
                    f"{type(item).__name__}",
                    method=method,
                )
            error = item.get("error")
            if error:
                message = error.get("message", error) if isinstance(error, dict) else error
                raise RpcError(f"RPC operation {item.get('id')} failed: {message}", method=method)
            data = item.get("data")
            if data is not None and not isinstance(data, dict):
                raise RpcError(
                    f"Malformed RPC response from {self._rpc_url}: data is "
                    f"{type(data).__name__}",
                    method=method,
                )
        return body

    def create_document(self, domain: str, participants: set[str]) -> DocumentHandle:
        handle = DocumentHandle(
            document_id=_provisional_id(domain),
            collection_id=f"{domain}!{DEFAULT_COLLECTION_ID}",
            participants=set(participants),
            root_item_id=f"{PROVISIONAL_PREFIX}{secrets.token_hex(4)}",
        )
        handle.pending.append(
            self._op(
                "robot.createWavelet",
                {
                    "waveId": handle.document_id,
                    "waveletId": handle.collection_id,
                    "waveletData": {
                        "waveId": handle.document_id,
                        "waveletId": handle.collection_id,
                        "rootBlipId": handle.root_item_id,
                        "participants": sorted(handle.participants),
                    },
                },
            )
        )
        return handle

    def fetch_document(self, document_id: str, collection_id: str) -> DocumentHandle:
        results = self._post(
            [self._op("robot.fetchWave", {"waveId": document_id, "waveletId": collection_id})]
        )
        data = results[0].get("data") or {}
        wavelet = data.get("waveletData") or {}
        if not isinstance(wavelet, dict) or not isinstance(wavelet.get("participants", []), list):
            raise RpcError(
                f"Malformed waveletData for {document_id}", method="robot.fetchWave"
            )
        return DocumentHandle(
            document_id=document_id,
            collection_id=collection_id,
            participants=set(wavelet.get("participants") or []),
            root_item_id=wavelet.get("rootBlipId"),
        )

    def add_participant(self, handle: DocumentHandle, address: str) -> None:
        handle.participants.add(address)
        handle.pending.append(
            self._op(
                "wavelet.addParticipant",
                {
                    "waveId": handle.document_id,
                    "waveletId": handle.collection_id,
                    "participantId": address,
                },
            )
        )

    def post_line(self, handle: DocumentHandle, text: str) -> None:
        handle.pending.append(
            self._op(
                "document.appendMarkup",
                {
                    "waveId": handle.document_id,
                    "waveletId": handle.collection_id,
                    "blipId": handle.root_item_id,
                    "content": f"<p>{escape(text)}</p>",
                },
            )
        )

    def submit(self, handle: DocumentHandle) -> str:
        if not handle.pending:
            return handle.document_id

        results = self._post(handle.pending)
        handle.pending = []

        data = results[0].get("data") if results else None
        assigned = data.get("waveId") if isinstance(data, dict) else None
        if assigned:
            handle.document_id = str(assigned)
        elif handle.document_id.split("!")[-1].startswith(PROVISIONAL_PREFIX):
            raise RpcError("RPC response did not carry the new document id", method="submit")
        return handle.document_id


class RobotRpcDocumentService:
    """DocumentServicePort backed by an httpx client."""

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout_s: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        self._client = client or httpx.Client(timeout=timeout_s)
        self._owns_client = client is None

    def connect(self, agent_address: str, consumer_secret: str) -> RobotRpcSession:
        logger.debug("Opening document session for %s", agent_address)
        return RobotRpcSession(
            self._client, self.rpc_url, httpx.BasicAuth(agent_address, consumer_secret)
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
