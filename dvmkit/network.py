"""Length-prefixed JSON messaging between vending machines."""

from __future__ import annotations

import json
import logging
import socket
import struct
import threading
from typing import Any, Callable, Mapping, Protocol

from dvmkit.dto import RequestPrePayment, RequestStock, ResponsePrePayment, ResponseStock

logger = logging.getLogger(__name__)

_LENGTH = struct.Struct("!i")

DEFAULT_PEERS: dict[int, tuple[str, int]] = {1: ("127.0.0.1", 9001)}


def _receive_exactly(sock: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            raise ConnectionError(f"connection closed after {len(data)} of {size} bytes")
        data += chunk
    return bytes(data)


def send_message(sock: socket.socket, text: str) -> None:
    """Send ``text`` as UTF-8 preceded by its byte length as a 4-byte big-endian int."""
    payload = text.encode("utf-8")
    sock.sendall(_LENGTH.pack(len(payload)) + payload)


def receive_message(sock: socket.socket) -> str:
    """Read one length-prefixed message; raise ConnectionError if it is cut short."""
    (length,) = _LENGTH.unpack(_receive_exactly(sock, _LENGTH.size))
    if length < 0:
        raise ConnectionError(f"invalid message length {length}")
    return _receive_exactly(sock, length).decode("utf-8")


class StockResponder(Protocol):
    def response_beverage_stock(self, beverage_id: int, quantity: int) -> ResponseStock: ...


class PrePaymentResponder(Protocol):
    def response_pre_pay(
        self, beverage_id: int, quantity: int, auth_code: str
    ) -> ResponsePrePayment: ...


def _close_quietly(sock: socket.socket) -> None:
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        pass
    sock.close()


class SocketManager:
    """Serves requests from other machines and sends requests to them.

    ``peers`` maps machine ids to (address, port). ``start`` opens the server
    socket and connects to the peers in the background; ``close`` stops both.
    """

    def __init__(
        self,
        src_id: int,
        server_port: int,
        peers: Mapping[int, tuple[str, int]] | None = None,
        *,
        host: str = "",
        connect_attempts: int = 100,
        retry_delay: float = 1.0,
    ) -> None:
        self.src_id = src_id
        self.server_port = server_port
        self.peers = dict(DEFAULT_PEERS if peers is None else peers)
        self._host = host
        self._connect_attempts = connect_attempts
        self._retry_delay = retry_delay
        self._stock_controller: StockResponder | None = None
        self._pre_payment_controller: PrePaymentResponder | None = None
        self._server: socket.socket | None = None
        self._connections: dict[int, socket.socket] = {}
        self._connection_locks: dict[int, threading.Lock] = {}
        self._clients: set[socket.socket] = set()
        self._lock = threading.Lock()
        self._closed = threading.Event()

    def __enter__(self) -> SocketManager:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def connected_peers(self) -> list[int]:
        with self._lock:
            return sorted(self._connections)

    def start(self) -> None:
        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            server.bind((self._host, self.server_port))
            server.listen(3)
        except OSError:
            server.close()
            raise
        server.settimeout(0.2)
        self._server = server
        self.server_port = server.getsockname()[1]
        threading.Thread(target=self._accept_loop, args=(server,), daemon=True).start()
        threading.Thread(target=self._connect_peers, daemon=True).start()

    def close(self) -> None:
        self._closed.set()
        with self._lock:
            sockets = [*self._connections.values(), *self._clients]
            self._connections.clear()
            self._connection_locks.clear()
            self._clients.clear()
        if self._server is not None:
            self._server.close()
            self._server = None
        for sock in sockets:
            _close_quietly(sock)

    def set_controller(
        self, stock_controller: StockResponder, pre_payment_controller: PrePaymentResponder
    ) -> None:
        self._stock_controller = stock_controller
        self._pre_payment_controller = pre_payment_controller

    # Outgoing requests

    def _exchange(self, dvm_id: int, message: Mapping[str, Any]) -> Any:
        with self._lock:
            sock = self._connections.get(dvm_id)
            lock = self._connection_locks.get(dvm_id)
        if sock is None or lock is None:
            raise ConnectionError(f"not connected to DVM {dvm_id}")
        with lock:
            send_message(sock, json.dumps(message, ensure_ascii=False))
            return json.loads(receive_message(sock))

    def request_beverage_stock_to_others(self, beverage_id: int, quantity: int) -> list[ResponseStock]:
        """Ask every connected machine about a beverage; broadcast uses dst_id 0."""
        request = RequestStock(beverage_id, quantity, src_id=self.src_id, dst_id=0)
        return [
            ResponseStock.from_dict(self._exchange(dvm_id, request.to_dict()))
            for dvm_id in self.connected_peers
        ]

    def request_pre_payment(self, beverage_id: int, quantity: int, auth_code: str, dst_id: int) -> bool:
        request = RequestPrePayment(beverage_id, quantity, auth_code, src_id=self.src_id, dst_id=dst_id)
        return ResponsePrePayment.from_dict(self._exchange(dst_id, request.to_dict())).availability

    # Answers to incoming requests

    def request_beverage_info(
        self, beverage_id: int, quantity: int, src_id: int, dst_id: int, client: socket.socket
    ) -> ResponseStock:
        if self._stock_controller is None:
            raise RuntimeError("no stock controller set")
        response = self._stock_controller.response_beverage_stock(beverage_id, quantity)
        response.set_src_and_dst(self.src_id, src_id)
        send_message(client, json.dumps(response.to_dict(), ensure_ascii=False))
        return response

    def request_pre_pay(
        self,
        beverage_id: int,
        quantity: int,
        auth_code: str,
        src_id: int,
        dst_id: int,
        client: socket.socket,
    ) -> ResponsePrePayment:
        if self._pre_payment_controller is None:
            raise RuntimeError("no pre-payment controller set")
        response = self._pre_payment_controller.response_pre_pay(beverage_id, quantity, auth_code)
        response.set_src_and_dst(self.src_id, src_id)
        send_message(client, json.dumps(response.to_dict(), ensure_ascii=False))
        return response

    # Background work

    def _connect(self, address: str, port: int) -> socket.socket | None:
        for _ in range(self._connect_attempts):
            if self._closed.is_set():
                return None
            try:
                return socket.create_connection((address, port))
            except OSError:
                self._closed.wait(self._retry_delay)
        return None

    def _connect_peers(self) -> None:
        for dvm_id, (address, port) in sorted(self.peers.items()):
            sock = self._connect(address, port)
            if sock is None:
                logger.warning("could not connect to DVM %d at %s:%d", dvm_id, address, port)
                continue
            with self._lock:
                if self._closed.is_set():
                    sock.close()
                    return
                self._connections[dvm_id] = sock
                self._connection_locks[dvm_id] = threading.Lock()

    def _accept_loop(self, server: socket.socket) -> None:
        while not self._closed.is_set():
            try:
                client, _ = server.accept()
            except socket.timeout:
                continue
            except OSError as exc:
                if self._closed.is_set():
                    return
                logger.error("accept failed: %s", exc)
                continue
            client.settimeout(None)
            with self._lock:
                if self._closed.is_set():
                    client.close()
                    return
                self._clients.add(client)
            threading.Thread(target=self._serve_client, args=(client,), daemon=True).start()

    def _serve_client(self, client: socket.socket) -> None:
        send_lock = threading.Lock()
        try:
            while not self._closed.is_set():
                try:
                    text = receive_message(client)
                except UnicodeDecodeError as exc:
                    logger.error("undecodable message: %s", exc)
                    continue
                except OSError:
                    return
                self._dispatch(text, client, send_lock)
        finally:
            with self._lock:
                self._clients.discard(client)
            client.close()

    def _dispatch(self, text: str, client: socket.socket, send_lock: threading.Lock) -> None:
        handler: Callable[..., Any]
        try:
            data = json.loads(text)
            if not isinstance(data, dict):
                raise TypeError("message is not an object")
            msg_type = data.get("msg_type")
            if msg_type == "req_stock":
                stock = RequestStock.from_dict(data)
                handler = self.request_beverage_info
                args: tuple[Any, ...] = (stock.item_code, stock.item_num, stock.src_id, stock.dst_id, client)
            elif msg_type == "req_prepay":
                prepay = RequestPrePayment.from_dict(data)
                handler = self.request_pre_pay
                args = (
                    prepay.item_code,
                    prepay.item_num,
                    prepay.cert_code,
                    prepay.src_id,
                    prepay.dst_id,
                    client,
                )
            else:
                return
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("JSON parse error: %s", exc)
            return
        threading.Thread(target=self._reply, args=(send_lock, handler, args), daemon=True).start()

    @staticmethod
    def _reply(send_lock: threading.Lock, handler: Callable[..., Any], args: tuple[Any, ...]) -> None:
        with send_lock:
            try:
                handler(*args)
            except Exception:
                logger.exception("failed to answer request")