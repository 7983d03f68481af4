# dvmkit

dvmkit runs a distributed beverage vending machine (DVM). Each machine sells
its own stock and takes card payment. When it does not have enough of a drink,
it asks the other machines on the network, picks the nearest one that answered
and lets the customer pre-pay there. The customer gets a five-character
authentication code and collects the drink at the other machine by entering it.

## Running a machine

```
dvmkit <dvm-id> <server-port>
```

`dvm-id` is this machine's identifier on the network and `server-port` is the
TCP port it listens on for requests from other machines. The machine places
itself at coordinates (0, 0) and tries to connect, in the background, to a peer
machine with id 1 at `127.0.0.1:9001` (up to 100 attempts, one second apart).
It starts with drinks 1–6 in stock (`id + 10` units each) and drinks 7–20 out
of stock, and with one authentication code, `AB123`, for two of drink 1.

The console menu offers:

- `1` – choose a drink (id 1–20) and a quantity (up to three tries for the
  quantity). If the machine has enough stock, card payment follows. If not,
  the nearest machine that answered the stock request is shown and you may
  choose to pre-pay there; after a successful pre-payment the console goes on
  to the card payment step.
- `2` – enter an authentication code issued for this machine; two more codes
  are asked for if it is wrong, and after three wrong codes the attempt is
  abandoned.
- `0` – quit. End of input also ends the session.

Card numbers are asked for up to three times. If `card_db.txt` cannot be
opened during a payment, the command prints the error and exits with status 1.

## Card database

`dvmkit.credit.Bank` reads cards from `card_db.txt` in the current working
directory, or in the directory passed as `Bank(directory)`. Each line holds a
card number and an integer balance separated by whitespace:

```
CARD-ALPHA 15000
CARD-BETA 5000
```

Lines that do not start that way are skipped when looking a card up and kept
unchanged when balances are written back. `Bank.save_credit_card` rewrites the
file through `card_db_temp.txt` with the new balance; a card not yet listed is
appended.

## Network protocol

Machines talk over TCP. Every message is a UTF-8 JSON object preceded by its
byte length as a 4-byte big-endian integer (`dvmkit.network.send_message` and
`receive_message`). The messages, modelled in `dvmkit.dto`, are:

| `msg_type`    | class                | `msg_content` fields                        |
|---------------|----------------------|---------------------------------------------|
| `req_stock`   | `RequestStock`       | `item_code`, `item_num`                     |
| `resp_stock`  | `ResponseStock`      | `item_code`, `item_num`, `coor_x`, `coor_y` |
| `req_prepay`  | `RequestPrePayment`  | `item_code`, `item_num`, `cert_code`        |
| `resp_prepay` | `ResponsePrePayment` | `item_code`, `item_num`, `availability`     |

Every message also carries `src_id` and `dst_id`; a stock request is sent to
every connected machine with `dst_id` 0. Each class has `to_dict` and
`from_dict`.

`dvmkit.network.SocketManager(src_id, server_port, peers=None)` serves
incoming requests and sends outgoing ones. `peers` maps machine ids to
`(address, port)`; `start()` opens the server socket and connects to the peers
in the background, `close()` stops everything, and the manager can be used as
a context manager.

## Using the library

The domain objects can be used on their own:

```python
from dvmkit.auth import AuthCodeManager
from dvmkit.beverage import Beverage, BeverageManager
from dvmkit.exceptions import NotFoundError

beverages = BeverageManager()
beverages.add_beverage(Beverage(1, "Cola", 5, 1200))

beverages.has_enough_stock(1, 3)   # True
beverages.reduce_quantity(1, 3)    # True, two left
beverages.reduce_quantity(1, 9)    # False, stock unchanged

codes = AuthCodeManager()
code = codes.generate_auth_code()  # five letters and digits
codes.save_auth_code(1, 2, code)
codes.get_beverage_id(code)        # 1
codes.delete_auth_code(code)

try:
    codes.validate_auth_code(code)
except NotFoundError:
    ...
```

`dvmkit.location.LocationManager.calculate_nearest` picks the closest machine
from a list of `ResponseStock` answers and returns a `dvmkit.dto.DVMInfo`.
The controllers combine these pieces into the machine's use cases:

- `dvmkit.selection`: `SelectBeverageController` and `EnterAuthCodeController`
- `dvmkit.payment`: `RequestPaymentController` and `RequestPrePaymentController`
- `dvmkit.responders`: `ResponseStockController` and
  `ResponsePrePaymentController`, which answer other machines

The controllers that read from the console take an optional `reader` callable
in place of `input`. Failures are raised as the exceptions in
`dvmkit.exceptions`, all derived from `DVMError`; the payment errors
`CardNotFoundError`, `InsufficientBalanceError` and `BeverageReductionError`
live in `dvmkit.payment`.

## Limitations

- The command has no options for the peer list or the machine's position;
  those are fixed as described above. Use `SocketManager` directly for other
  peers.
- A stock answer carries only the answering machine's coordinates, so every
  machine that answers is considered, whatever its stock. With no answers the
  nearest machine is reported as id 0 at (0, 0).
- Stock and authentication codes live in memory only and are lost when the
  program ends; only card balances are stored, in a plain text file.