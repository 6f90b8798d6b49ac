# pairprof

`pairprof` is a lightweight instrumentation profiler for Python code,
together with a reader for JSON files of haversine coordinate pairs that
makes a convenient workload to profile. It depends only on the standard
library.

## Modules

- `pairprof.profiler` – `Profiler`, `Anchor`, `format_anchor`,
  `estimate_timer_freq`
- `pairprof.jsonparser` – `JSONParser`, `parse_json`, `lookup_element`,
  `convert_element_to_f64`, `parse_haversine_pairs`, plus the `Token`,
  `TokenType`, `Element`, `HaversinePair` and `JSONParseError` types
- `pairprof.fileio` – `read_entire_file`, `max_pair_count`
- `pairprof.answers` – `ReferenceAnswers`, `load_reference_answers`
- `pairprof.report` – `summary_lines`, `validation_lines`

## Profiling your own code

```python
import time

from pairprof.profiler import Profiler

profiler = Profiler(time.perf_counter_ns, True)

@profiler.function
def load():
    with profiler.block("read"):
        ...
    with profiler.block("decode"):
        ...

profiler.begin()
load()
lines = profiler.end_and_report(1_000_000_000)
```

`Profiler(timer, enabled)` reads ticks from `timer` (by default
`time.perf_counter_ns`). `block(label)` is a context manager that times its
body; `function` is a decorator that times each call under the function's
name. Blocks sharing a label share one `Anchor`, which records:

- `hit_count` – how many times the block finished,
- `elapsed_exclusive` – ticks spent in the block minus those spent in
  blocks nested inside it,
- `elapsed_inclusive` – ticks including nested blocks; a block that
  re-enters itself is not counted twice.

`begin()` marks the start of the run and `end()` returns the total elapsed
ticks. `anchors()` returns the anchors that recorded any time, in the order
their labels were first seen.

`end_and_report(timer_freq)` ends the run, prints the report and returns
its lines. If `timer_freq` is omitted it is measured with
`estimate_timer_freq`. The report starts with an empty line and
`Total time: <ms>ms (timer freq <freq>)` (left out when the frequency is
zero), followed by one line per anchor:

```
  label[hits]: exclusive (pct%, pct% w/children)
```

The `w/children` part appears only when inclusive and exclusive times
differ. `report_lines(total_elapsed, timer_freq)` builds the same lines
without printing, and `format_anchor(anchor, total_elapsed)` renders a
single anchor (it raises `ValueError` if `total_elapsed` is not positive).

With `enabled=False`, `block` yields `None` and records nothing, and the
report holds only the total time.

### Measuring a timer's frequency

`estimate_timer_freq(timer, os_timer, os_freq, milliseconds)` reads
`timer`, spins on `os_timer` for `milliseconds` (default 100) and returns
the estimated ticks per second of `timer`. Without `os_timer` it uses
`time.perf_counter_ns` at 1,000,000,000 ticks per second; if you pass an
`os_timer` you must also pass its `os_freq`.

## Reading haversine pairs

```python
from pairprof.fileio import max_pair_count, read_entire_file
from pairprof.jsonparser import parse_haversine_pairs

data = read_entire_file("haversine_input.json", profiler)
pairs = parse_haversine_pairs(data, max_pair_count(len(data)), profiler)
```

The input has the form
`{"pairs": [{"x0": ..., "y0": ..., "x1": ..., "y1": ...}, ...]}`.
`parse_haversine_pairs` returns at most `max_pair_count` `HaversinePair`
records (`x0`, `y0`, `x1`, `y1`); a missing field reads as `0.0`, and a
document without a `pairs` array gives an empty list. The profiler argument
is optional everywhere; when given, the work is timed under
`read_entire_file`, `parse_haversine_pairs`, `parse_json` and
`Lookup and Convert`.

`read_entire_file` returns the file's bytes and lets `OSError` propagate.
`max_pair_count(input_size)` is the input size divided by 24, the fewest
bytes one pair can take; a result of zero means the input cannot hold a
pair. A negative size raises `ValueError`.

## Reference answers and the summary text

A reference file is a sequence of little-endian 64-bit floats, one per pair,
followed by the expected sum. `load_reference_answers(data)` decodes it into
a `ReferenceAnswers` with `distances`, `total` and `pair_count`; trailing
bytes short of a whole value are ignored, and data shorter than eight bytes
raises `ValueError`.

`summary_lines(input_size, pair_count, total)` gives the
`Input size`, `Pair count` and `Haversine sum` lines, the sum printed with
16 decimal places. `validation_lines(pair_count, total, answers)` gives a
block that opens with an empty line and `Validation:`, adds a
`FAILED - pair count doesn't match N.` line when the counts differ, then
`Reference sum` and `Difference`, and closes with an empty line.

## Lower-level parsing

`JSONParser(source)` accepts bytes or text. `next_token()` returns the next
`Token` (type and raw bytes); `parse()` returns the root `Element` (label,
raw value bytes, children), or `None` if the input does not start a value.
Unexpected tokens raise `JSONParseError`, a `ValueError`. `parse_json` does
the same in one call. `lookup_element(obj, name)` returns the first child
labelled `name`, and `convert_element_to_f64(obj, name)` converts a numeric
child, with sign, fraction and exponent.

The parser is deliberately small: string values are kept as raw bytes, with
no escape decoding beyond skipping `\"`.

## What the package does not do

- It has no command-line program; you call the functions from your own code.
- It does not compute haversine distances. `summary_lines` and
  `validation_lines` format a sum that you compute from the
  `HaversinePair` records yourself.
- It does not generate input files or reference answer files.

## Running the tests

The test suite uses pytest, installed with the `test` extra.