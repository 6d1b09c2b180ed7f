# minircd

minircd is a small chat server. Each TCP client is served on its own thread,
picks a nickname that no other connected client is using, and can then send
text and slash commands. Text is echoed back to the sender.

## Installing

```
pip install .
```

## Running the server

```
minircd
```

By default the server listens on port 6667 on all IPv4 interfaces. Options:

- `--host` address to bind (default: all interfaces)
- `--port` port to listen on (default: 6667)
- `--backlog` size of the pending connection queue (default: 5)

The server logs connections and commands to standard error and runs until
interrupted with Ctrl+C. If the socket cannot be bound, it prints
`Failed to start server: ...` and exits with status 1.

Any line-oriented TCP client can connect to it, for example `nc localhost 6667`.

## Talking to the server

On connect the server sends
`Welcome to the IRC server! Please enter your nickname: `. If the nickname is
empty or already in use, the server says why and asks again. When it is
accepted the server replies `Welcome, <nick>! You are connected.` If all client
slots (100 by default) are in use, the server says it is full and closes the
connection.

After that:

- a plain line is answered with `[Server] <nick>: <text>`
- `/nick <new_nickname>` changes your nickname. The new name must not be empty,
  must differ from your current one and must not be in use by another client.
  Names longer than 31 characters are cut to 31.
- `/quit` replies `Goodbye, <nick>! Disconnecting.` and closes the connection
- `/` on its own gets `Empty command. Type /help for available commands.`
- any other `/command` gets `Unknown command: /command`

Trailing carriage returns and newlines are removed from every line, and empty
lines are ignored.

## Using it as a library

```python
import threading

from minircd.registry import ClientRegistry
from minircd.server import ChatServer

registry = ClientRegistry(10)
with ChatServer("127.0.0.1", 0, 5, registry) as server:
    print(server.address)   # the (host, port) the server is bound to
    threading.Thread(target=server.serve_forever, daemon=True).start()
    ...                     # leaving the block calls server.shutdown()
```

`minircd.server.create_server_socket(host, port, backlog)` returns a bound,
listening IPv4 socket with `SO_REUSEADDR` set.

`ClientRegistry` keeps connected clients in a fixed number of slots, guarded by
a lock:

- `add(conn, nickname)` stores a client in the first free slot and returns its
  index; it raises `ServerFullError` when every slot is in use
- `remove(index)` frees a slot and returns its `ClientInfo`, or `None` if the
  slot was already free
- `rename(index, nickname)` changes the nickname in an active slot and returns
  the stored name; it raises `KeyError` if the slot is free
- `is_nickname_taken(nickname)`, `active_clients()` (a list of
  `(index, ClientInfo)` pairs) and `len(registry)`

`remove` and `rename` raise `IndexError` for an index outside the registry.
Stored nicknames are cut to 31 characters.

`minircd.session.ClientSession(conn, registry)` runs one client's conversation
with `run()`; `handle_line(line)` returns the reply to a single line without
touching the socket. `strip_newline` and `format_peer` are small helpers used
by the session and server.

## What it does not do

- Messages are not relayed to other clients; each line is only echoed back to
  its sender. There are no channels, private messages or broadcasts of nickname
  changes.
- It does not speak the IRC wire protocol; commands are the few slash commands
  above, and there is no `/help` command.
- Input is not buffered into lines: each read from the socket (up to 1023
  bytes, or 31 while choosing a nickname) is handled as one line.
- Nothing is stored between runs.

## Tests

```
pip install .[test]
pytest
```