"""The conversation with one connected client."""

from __future__ import annotations

import logging
from contextlib import suppress
from typing import Any

from .registry import BUFFER_SIZE, MAX_NICK_LENGTH, ClientRegistry, ServerFullError

log = logging.getLogger(__name__)

PROMPT = "Welcome to the IRC server! Please enter your nickname: "


def strip_newline(text: str) -> str:
    """Remove trailing carriage returns and line feeds."""
    return text.rstrip("\r\n")


def format_peer(address: Any) -> str:
    """Render a socket peer address as host:port."""
    if (
        isinstance(address, tuple)
        and len(address) in (2, 4)
        and isinstance(address[0], str)
        and isinstance(address[1], int)
    ):
        return f"{address[0]}:{address[1]}"
    return "unknown address"


class ClientSession:
    """Asks a client for a nickname, then answers its messages and commands."""

    def __init__(self, conn: Any, registry: ClientRegistry) -> None:
        self.conn = conn
        self.registry = registry
        self.nickname: str | None = None
        self.index: int | None = None
        self.finished = False

    def _send(self, text: str) -> None:
        self.conn.sendall(text.encode("utf-8"))

    def _receive(self, size: int) -> str | None:
        data = self.conn.recv(size)
        if not data:
            return None
        data = data.split(b"\0", 1)[0]
        return strip_newline(data.decode("utf-8", errors="replace"))

    def _choose_nickname(self) -> str | None:
        while True:
            try:
                self._send(PROMPT)
                nickname = self._receive(MAX_NICK_LENGTH - 1)
            except OSError as exc:
                log.warning("Nickname negotiation failed: %s", exc)
                return None
            if nickname is None:
                log.info("Client disconnected before choosing a nickname.")
                return None
            if not nickname:
                reply = "Nickname cannot be empty. Please try again.\n"
            elif self.registry.is_nickname_taken(nickname):
                reply = f"Nickname '{nickname}' is already taken. Please choose another.\n"
            else:
                return nickname
            try:
                self._send(reply)
            except OSError as exc:
                log.warning("Sending nickname error failed: %s", exc)
                return None

    def run(self) -> None:
        """Drive the whole session until the client quits or disconnects."""
        nickname = self._choose_nickname()
        if nickname is None:
            return
        try:
            self.index = self.registry.add(self.conn, nickname)
        except ServerFullError:
            log.info("Server full. Disconnecting client (%s)", nickname)
            with suppress(OSError):
                self._send("Server is currently full. Please try again later. Disconnecting.\n")
            return
        self.nickname = nickname
        log.info("Client set nickname to: %s, added at index %d", nickname, self.index)
        try:
            try:
                self._send(f"Welcome, {nickname}! You are connected.\n")
            except OSError as exc:
                log.warning("Sending welcome message failed: %s", exc)
            self._message_loop()
        finally:
            log.info("Ending session for %s (idx %d)", self.nickname, self.index)
            self.registry.remove(self.index)

    def _message_loop(self) -> None:
        while not self.finished:
            try:
                line = self._receive(BUFFER_SIZE - 1)
            except OSError as exc:
                log.warning("recv failed: %s", exc)
                break
            if line is None:
                log.info("[%s] (idx %s) disconnected.", self.nickname, self.index)
                break
            reply = self.handle_line(line)
            if reply is None:
                continue
            try:
                self._send(reply)
            except OSError as exc:
                log.warning("send failed: %s", exc)
                if not line.startswith("/"):
                    break

    def handle_line(self, line: str) -> str | None:
        """Return the reply to one line from the client, or None for a blank line."""
        line = strip_newline(line)
        if not line:
            return None
        if line.startswith("/"):
            log.info("[%s] (idx %s) sent COMMAND: %s", self.nickname, self.index, line)
            return self._command(line[1:])
        log.info("[%s] (idx %s) sent MESSAGE: %s", self.nickname, self.index, line)
        return f"[Server] {self.nickname}: {line}\n"

    def _command(self, body: str) -> str:
        words = body.lstrip(" ")
        if not words:
            return "Empty command. Type /help for available commands.\n"
        command, _, args = words.partition(" ")
        if command == "quit":
            self.finished = True
            log.info("[%s] (idx %s) issued /quit command.", self.nickname, self.index)
            return f"Goodbye, {self.nickname}! Disconnecting.\n"
        if command == "nick":
            return self._change_nickname(args)
        return f"Unknown command: /{command}\n"

    def _change_nickname(self, args: str) -> str:
        if not args:
            return "Usage: /nick <new_nickname>\n"
        new_nick = strip_newline(args[: MAX_NICK_LENGTH - 1])
        if not new_nick:
            return "New nickname cannot be empty.\n"
        if new_nick == self.nickname:
            return f"You are already known as {new_nick}.\n"
        if self.registry.is_nickname_taken(new_nick):
            return f"Nickname '{new_nick}' is already taken.\n"
        old = self.nickname
        self.nickname = self.registry.rename(self.index, new_nick)
        log.info("[%s] (idx %s) changed nickname to %s.", old, self.index, self.nickname)
        return f"Your nickname has been changed to {self.nickname}.\n"