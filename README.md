# sonarbase

Plain Python data types for sonar data, with numpy doing the vector and matrix work.

- Angles kept in the range (-π, π], and segments of the circle.
- Timestamps and durations with microsecond resolution.
- Single sonar beams and whole sonar scans of 8-bit echo values.
- Multibeam sonar samples of normalised float bins, with conversion to and
  from beams and scans.
- Image frames with a mode, a status and named text attributes.

## Installation

```
pip install sonarbase
```

To run the tests:

```
pip install "sonarbase[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `sonarbase.numeric` | `nan`, `is_nan`, `unset`, `is_unset`, `unknown`, `is_unknown`, `infinity`, `is_infinity` |
| `sonarbase.angle` | `Angle`, `AngleSegment` |
| `sonarbase.linalg` | `is_not_nan`, `is_finite`, `guarantee_spd` |
| `sonarbase.time` | `Time`, `Resolution`, `Timeval` |
| `sonarbase.sonar_beam` | `SonarBeam` |
| `sonarbase.sonar_scan` | `SonarScan` |
| `sonarbase.sonar` | `Sonar` |
| `sonarbase.frame` | `Frame`, `FrameSize`, `FrameMode`, `FrameStatus`, `FrameAttribute`, `FramePair`, `channel_count_for_mode`, `to_frame_mode` |

Unknown or unset values are NaN throughout: a default `Angle()` is unknown,
and `Sonar.resize` fills new bins with NaN.

## Examples

### Angles

```python
from sonarbase.angle import Angle, AngleSegment

a = Angle.from_deg(270)
a.deg                                      # about -90.0 (a property)
Angle.normalize_rad(4.0)                   # wrapped into (-pi, pi]

seg = AngleSegment(Angle.from_deg(-30), Angle.deg2rad(60))
seg.is_inside(Angle.from_deg(10))          # True
seg.get_intersections(AngleSegment(Angle.from_deg(0), Angle.deg2rad(90)))
```

`AngleSegment` raises `ValueError` for a negative width. `Angle.is_in_range`
still works but issues a `DeprecationWarning`; use `AngleSegment` instead.

### Timestamps

```python
from sonarbase.time import Time, Resolution

t = Time.from_seconds(1.5)
t.to_microseconds()                        # 1500000
text = t.to_string(Resolution.MILLISECONDS)   # local time, e.g. "19700101-01:00:01:500"
Time.from_string(text, Resolution.MILLISECONDS) == t   # True
```

`Time` is an immutable, ordered value; `+`, `-`, division by an int and
multiplication by a number give new `Time` values. `from_string` raises
`ValueError` when the string does not fit the resolution or the format.

### Sonar scans

```python
from sonarbase.angle import Angle
from sonarbase.sonar_beam import SonarBeam
from sonarbase.sonar_scan import SonarScan

scan = SonarScan(4, 3, Angle.from_deg(30), Angle.from_deg(20), memory_layout_column=False)
scan.add_sonar_beam(SonarBeam(bearing=Angle.from_deg(10), beam=bytearray([1, 2, 3])))
scan.has_sonar_beam(Angle.from_deg(10))    # True
scan.get_sonar_beam(Angle.from_deg(10)).beam   # bytearray(b'\x01\x02\x03')
```

Beams can only be added to or read from a scan stored one beam per row;
`toggle_memory_layout()` switches between the row and column layouts.

### A multibeam sonar sample

```python
from sonarbase.angle import Angle
from sonarbase.sonar import Sonar
from sonarbase.time import Time

sample = Sonar.from_single_beam(
    Time.now(),
    Time.from_microseconds(100),
    Angle.from_deg(3),
    Angle.from_deg(20),
    [0.0, 0.2, 0.8, 0.1],
    Angle.from_deg(0),
    Sonar.speed_of_sound_in_water(),
)
sample.bin_start_distance(2)               # distance of the third bin in metres
beam = sample.to_sonar_beam(1.0)           # 8-bit beam, values scaled to 0..255
```

Bins are stored beam by beam: the data for beam N starts at `N * bin_count`.
`push_beam` and `set_beam` raise `ValueError` when the bin count does not
match, or when the sample keeps per-beam timestamps and no `beam_time` is
given. `validate()` raises `ValueError` when the bins, timestamps or bearings
do not match the bin and beam counts. `Sonar.from_sonar_scan` and
`Sonar.from_sonar_beam` go the other way, dividing byte values by 255 and
multiplying by the gain.

### Image frames

```python
from sonarbase.frame import Frame, FrameMode

frame = Frame()
frame.init(640, 480, 8, FrameMode.RGB, 0, 0)
frame.set_attribute("exposure", 12)
frame.get_attribute("exposure", int)       # 12
frame.row_size()                           # 1920
frame.at(0, 0)[0] = 255                    # writable view of one pixel's bytes
```

`to_frame_mode("MODE_RGB")` maps mode names to `FrameMode`, giving
`FrameMode.UNDEFINED` for unknown names. `row_size()` raises `RuntimeError`
for compressed modes, and `set_image` raises `ValueError` when the byte count
does not fit an uncompressed frame.

## What this package does not do

It holds and converts data only. It does not render scenes, produce sonar
images from a camera view, add noise or gain to simulated data, or read and
write files; there is no command-line tool.