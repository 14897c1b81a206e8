# fanucbot

`fanucbot` talks to a FANUC robot controller over the industrial
"simple message" protocol. It contains:

- the wire messages;
- asyncio channels for motion and for state;
- pose geometry;
- loaders for STL and OBJ meshes;
- ordered tables of calibration, path and task points.

## Modules

- **`fanucbot.messages`**: the protocol's binary packets.
  - Message classes: `JointPosition`, `JointTrajPoint`, `XyzwprTrajPoint` and `Status`.
  - Codes: `MsgType`, `CommType`, `ReplyCode`, `SequenceCode`, `TriState` and `Mode`.
  - `encode(message, bigendian)` and `decode(packet, bigendian)` handle either word order. In big-endian mode the XYZWPR configuration word keeps its controller order.
  - `decode` returns only the `Header` for message types it has no layout for.
  - A packet that is too short, or whose length is invalid, raises `MessageError`.
- **`fanucbot.config`**: `XyzwprData` holds a Cartesian pose. `make_config` and `parse_config` pack and unpack the flip/left/up/top flags and the three turn counters into the signed 32-bit configuration word.
- **`fanucbot.types`**: the value types.
  - Points and positions: `Vertex`, `RotationAngle`, `BotPosition`, `CalibPoint`, `HomePoint` and `TaskPoint`.
  - Enums: `BotState`, `CalibResult`, `PrepareResult`, `WorkResult`, `ShapeType` and `TaskType`.
- **`fanucbot.geometry`**: `Quaternion` uses extrinsic XYZ Euler angles. `Transform` is a 3x3 linear part plus a translation.
- **`fanucbot.poses`**: conversions between controller poses and user-frame positions.
  - `transform_xyzwpr` and `xyzwpr_to_bot_position` work on controller XYZWPR poses, with angles in degrees.
  - `bot_position_to_xyzwpr` and `point_to_xyzwpr` first point the tool Z axis along a normal. They then apply the point's extra rotation.
- **`fanucbot.settings`**: `load_settings(path)` reads an INI file into `FanucSettings`.
- **`fanucbot.connection`**:
  - `Signal` is a simple list of callbacks.
  - `keep_connected(protocol, host, port, retry_delay)` reconnects a channel after a failure or a lost connection, waiting `retry_delay` seconds before each new attempt.
- **`fanucbot.relay`**: `RelayChannel` sends trajectory points one at a time. It sends each point only after the controller has accepted the previous one.
  - Commands: `move_point`, `move_trajectory`, `move_joint_point` and `move_joint_trajectory`.
  - `stop()` drops the pending path and sends the stop-trajectory request.
  - Its signals report each enqueued point, any failure, and the end of the trajectory.
  - A point sent while the channel is not connected is reported at once through the fail signal.
- **`fanucbot.state`**: `StateChannel` decodes joint, XYZWPR and status packets and emits them as signals.
  - It has a watchdog. It closes the connection if no packet arrives between two ticks; ticks are 5 seconds apart by default.
- **`fanucbot.models`**: `ModelLoaderFactory` picks a loader by file-dialog filter name: `"STL (*.stl)"` or `"OBJ (*.obj)"`.
  - Loaders return a `Shell` of non-degenerate `Triangle`s.
  - An unknown filter, an unreadable file or a malformed file gives an empty shell.
- **`fanucbot.calib_table`** and **`fanucbot.task_tables`**: the tables `CalibPointsTable`, `PathPointsTable` and `TaskPointsTable`.
  - Rows are named `C1…`, `P1…` and `T1…` respectively.
  - `display` formats a cell. Coordinates and angles are zero-padded to a width of 12 with two decimals.
  - `move_row` and `drop` reorder rows.
  - `edit(row, editor)` replaces a row's point; the editor returns the new point, or `None` to cancel.

## Installation

```
pip install .
```

## Settings

`load_settings` reads keys from the `[General]` section. Keys placed before any section header count as part of it. A missing file or a missing key keeps the default.

| key | default | meaning |
| --- | --- | --- |
| `server_ip` | `127.0.0.1` | controller address |
| `server_relay_port` | `11000` | motion relay port |
| `server_state_port` | `11002` | state port |
| `bigendian` | `false` | word order on the wire |
| `prefix1`, `prefix2` | `0` | XYZWPR frame prefixes |
| `flip`, `up`, `top` | `false`, `true`, `true` | arm configuration |
| `cam_delay` | `3000` | camera delay in milliseconds |
| `world2user`, `user2world` | identity | 12 comma-separated row-major 3x4 values; both must be present |

## Example

```python
import asyncio

from fanucbot.config import XyzwprData
from fanucbot.connection import keep_connected
from fanucbot.relay import RelayChannel
from fanucbot.settings import load_settings


async def main():
    settings = load_settings("fanuc.ini")
    relay = RelayChannel(settings.bigendian, settings.prefix1, settings.prefix2)
    done = asyncio.Event()
    relay.trajectory_enqueue_finished.connect(done.set)
    link = asyncio.create_task(
        keep_connected(relay, settings.server_ip, settings.server_relay_port))
    while not relay.connected():
        await asyncio.sleep(0.1)
    relay.move_point(XyzwprData(xyzwpr=[500.0, 0.0, 300.0, 180.0, 0.0, 0.0]))
    await done.wait()
    link.cancel()


asyncio.run(main())
```

## What it does not do

The package provides protocol channels and building blocks only. It has no:

- task sequencer that runs home and task points with delays and snapshot calibration;
- fitting of a part-to-robot transform from point pairs;
- user interface or 3D viewer;
- command-line program.

The point tables hold data and format cells, but they do not draw anything.

## Tests

```
pip install .[test]
pytest
```