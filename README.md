# inkrt

`inkrt` provides the state and operations that an interpreter for ink
interactive stories works on. It includes typed values, ink lists, the text
output stream, the call and evaluation stacks, external functions and the
story-wide globals. It needs nothing beyond the standard library.

## Modules

- `inkrt.values` contains `Value`, which is a frozen `(type, data)` pair. It
  also contains the `ValueType` enum, the `InkError` exception and
  `numeric_cast(value, to)`. `numeric_cast` widens booleans to integers and
  signed integers to floats. Any other mismatch raises `InkError`.
- `inkrt.list_store` contains `ListFlag`, `ListRef` and `ListStore`.
  `ListStore` holds list definitions and a pool of list values. The pool can
  be garbage collected with `clear_usage`, `mark_used` and `gc`. The store
  supports `add`, `sub` (with another list, with a flag, or with an integer
  shift), `intersect`, `all`, `invert`, `range` and `redefine`.
- `inkrt.list_table` contains `ListTable`. It is a `ListStore` that also has
  `flag_name`, `list_str`, `count`, `min`, `max`, `lrnd`, the comparisons
  (`less`, `greater`, `less_equal`, `greater_equal`, `equal`, `not_equal`),
  `has`, `hasnt` and `named_flags`.
- `inkrt.numeric_ops` contains the `Command` enum and
  `numeric_operation(command, operands, rng)`. That function handles
  arithmetic, comparison, logic, `MIN`/`MAX`, `FLOOR`/`CEILING`/`INT_CAST`
  and `RANDOM`. The module also has `ink_floor` and `ink_ceil`.
- `inkrt.list_ops` contains `list_operation(command, operands, lists, rng)`,
  which runs the list commands on `Value` operands.
- `inkrt.output` contains `OutputStream`, which collects output values.
  - Glue and function ends trim the whitespace and newlines before them.
  - A marker splits off the part that `get`, `get_alloc` or `get_values`
    extracts.
  - `save`, `restore` and `forget` manage a save point.
- `inkrt.choice` contains `Choice` and
  `build_choice(stream, lists, index, path, thread)`. `build_choice` takes
  a choice's text from an output stream.
- `inkrt.stack` contains `CallStack` and `EvalStack`.
  - `CallStack` holds temporary variables, frames (`FrameType.FUNCTION`,
    `TUNNEL`, `THREAD`) and thread blocks. Its thread methods are
    `fork_thread`, `complete_thread` and `collapse_to_thread`.
  - `EvalStack` is the evaluation stack.
  - Both stacks can `save`, `restore` and `forget`.
- `inkrt.functions` contains `FunctionRegistry`. It binds Python callables
  by name, and the first binding of a name wins. `call` pops the arguments
  from an `EvalStack` and pushes the result. The module also has the helpers
  `pop_int`, `pop_str`, `push_int` and `push_string`.
- `inkrt.globals` contains `Globals`. It holds global variables, visit
  counts and turn counts, and the story's `ListTable`. It has typed getters
  and setters (`get_int`/`set_int`, `get_uint`, `get_float`, `get_str`, …)
  and can save and restore its variables.

Errors that the runtime detects are raised as `InkError`. Where randomness
is involved, `rng` may be any object with `randrange(n)`, such as
`random.Random(seed)`. It defaults to the `random` module.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Arithmetic on evaluation-stack values:

```python
from inkrt.numeric_ops import Command, numeric_operation
from inkrt.stack import EvalStack
from inkrt.values import Value, ValueType

stack = EvalStack()
stack.push(Value(ValueType.INT32, 2))
stack.push(Value(ValueType.INT32, 3))
rhs, lhs = stack.pop(), stack.pop()
print(numeric_operation(Command.ADD, [lhs, rhs]).data)  # 5
```

Lists:

```python
from inkrt.list_store import ListFlag
from inkrt.list_table import ListTable

lists = ListTable([("colours", {0: "red", 1: "green", 2: "blue"})])
ref = lists.create()
lists.add_inplace(ref, ListFlag(0, 0))
lists.add_inplace(ref, ListFlag(0, 2))
print(lists.list_str(ref))  # red, blue
print(lists.count(ref))     # 2
```

Glue in the output stream:

```python
from inkrt.output import OutputStream
from inkrt.values import Value, ValueType

out = OutputStream()
out.append(Value(ValueType.STRING, "Hello"))
out.append(Value(ValueType.NEWLINE))
out.append(Value(ValueType.GLUE))
out.append(Value(ValueType.STRING, " world"))
print(out.get())  # Hello world
```

Globals:

```python
from inkrt.globals import Globals
from inkrt.values import Value, ValueType

g = Globals(num_containers=3)
g.visit(1)
g.turn()
print(g.visits(1), g.turns(1))  # 1 1
g.set_variable("x", Value(ValueType.INT32, 5))
g.set_int("x", 7)
print(g.get_int("x"))  # 7
```

## What this package does not do

`inkrt` provides the building blocks only. It has no story interpreter, so
it cannot load a compiled story file, run story instructions, produce lines
or take choices. It also has no command-line program. `Globals` does not
initialise variables by running a story; you set them with `set_variable`.
`Globals` also does not collect unused strings, because strings are plain
Python objects.