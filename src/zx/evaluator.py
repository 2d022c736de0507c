"""Post-order evaluation of expression trees over ``Value``."""

from __future__ import annotations

from typing import Callable, Final

import mpmath

from .ast import Branch, Expr, Leaf
from .config import MAX_INT_BITS
from .errors import CalcRuntimeError
from .operators import Opcode
from .values import Value, truncate

UnaryKernel = Callable[[Value], Value]
BinaryKernel = Callable[[Value, Value], Value]


def _real_or_nan(result) -> mpmath.mpf:
    # Square roots and powers of negatives come back complex from mpmath.
    if isinstance(result, mpmath.mpc):
        return mpmath.mpf("nan")
    return result


def _tdiv(num: int, den: int) -> int:
    if den == 0:
        raise ZeroDivisionError("Division by zero")
    quotient = abs(num) // abs(den)
    return -quotient if (num < 0) != (den < 0) else quotient


def _tmod(num: int, den: int) -> int:
    return num - den * _tdiv(num, den)


def _fdiv(num: mpmath.mpf, den: mpmath.mpf) -> mpmath.mpf:
    if den == 0:
        raise ZeroDivisionError("Division by zero")
    return num / den


def _fmod(num: mpmath.mpf, den: mpmath.mpf) -> mpmath.mpf:
    return num - mpmath.floor(_fdiv(num, den)) * den


def _shift_amount(value: Value) -> int:
    amount = value.as_int()
    if amount < 0:
        raise ValueError("Negative shift count")
    return amount


def _bitwise(fn: Callable[[int, int], int]) -> BinaryKernel:
    def kernel(left: Value, right: Value) -> Value:
        return Value.integer(fn(left.as_int(), right.as_int()))

    return kernel


def _arithmetic(int_fn: Callable[[int, int], int], float_fn: Callable[[mpmath.mpf, mpmath.mpf], mpmath.mpf]) -> BinaryKernel:
    def kernel(left: Value, right: Value) -> Value:
        if left.is_float or right.is_float:
            return Value.floating(float_fn(left.as_float(), right.as_float()))
        return Value.integer(int_fn(left.z, right.z))

    return kernel


def _shl(left: Value, right: Value) -> Value:
    amount = _shift_amount(right)
    if left.is_float:
        return Value.floating(mpmath.ldexp(left.f, amount))
    if not left.z:
        return left
    if left.z.bit_length() + amount > MAX_INT_BITS:
        raise OverflowError("Shift count too large")
    return Value.integer(left.z << amount)


def _shr(left: Value, right: Value) -> Value:
    amount = _shift_amount(right)
    if left.is_float:
        return Value.floating(mpmath.ldexp(left.f, -amount))
    # Past the bit length the result is already 0 or -1.
    return Value.integer(left.z >> min(amount, left.z.bit_length()))


def _pow(left: Value, right: Value) -> Value:
    return Value.floating(_real_or_nan(mpmath.power(left.as_float(), right.as_float())))


def _float_fn(fn: Callable[[mpmath.mpf], object]) -> UnaryKernel:
    def kernel(operand: Value) -> Value:
        return Value.floating(_real_or_nan(fn(operand.as_float())))

    return kernel


def _demoting(fn: Callable[[mpmath.mpf], mpmath.mpf]) -> UnaryKernel:
    def kernel(operand: Value) -> Value:
        if not operand.is_float:
            return operand
        return Value.integer(truncate(fn(operand.f)))

    return kernel


def _neg(operand: Value) -> Value:
    if operand.is_float:
        return Value.floating(-operand.f)
    return Value.integer(-operand.z)


def _not(operand: Value) -> Value:
    return Value.integer(~operand.as_int())


_BINARY_KERNELS: Final[dict[Opcode, BinaryKernel]] = {
    Opcode.OR: _bitwise(lambda a, b: a | b),
    Opcode.XOR: _bitwise(lambda a, b: a ^ b),
    Opcode.AND: _bitwise(lambda a, b: a & b),
    Opcode.SHL: _shl,
    Opcode.SHR: _shr,
    Opcode.ADD: _arithmetic(lambda a, b: a + b, lambda a, b: a + b),
    Opcode.SUB: _arithmetic(lambda a, b: a - b, lambda a, b: a - b),
    Opcode.MUL: _arithmetic(lambda a, b: a * b, lambda a, b: a * b),
    Opcode.DIV: _arithmetic(_tdiv, _fdiv),
    Opcode.MOD: _arithmetic(_tmod, _fmod),
    Opcode.POW: _pow,
}

_UNARY_KERNELS: Final[dict[Opcode, UnaryKernel]] = {
    Opcode.NEG: _neg,
    Opcode.POS: lambda operand: operand,
    Opcode.NOT: _not,
    Opcode.SQRT: _float_fn(mpmath.sqrt),
    Opcode.COS: _float_fn(mpmath.cos),
    Opcode.SIN: _float_fn(mpmath.sin),
    Opcode.TAN: _float_fn(mpmath.tan),
    Opcode.FLOOR: _demoting(mpmath.floor),
    Opcode.CEIL: _demoting(mpmath.ceil),
    # nint breaks ties toward the even neighbour.
    Opcode.ROUND: _demoting(mpmath.nint),
}


def _apply(node: Branch, left: Value, right: Value | None) -> Value:
    opcode = node.op.opcode
    try:
        if right is None:
            unary = _UNARY_KERNELS.get(opcode)
            if unary is not None:
                return unary(left)
        else:
            binary = _BINARY_KERNELS.get(opcode)
            if binary is not None:
                return binary(left, right)
    except ZeroDivisionError as err:
        raise CalcRuntimeError("Division by zero") from err
    except MemoryError as err:
        raise CalcRuntimeError("Out of memory") from err
    except (ArithmeticError, ValueError) as err:
        raise CalcRuntimeError(str(err)) from err
    raise CalcRuntimeError("Unknown operator")


def evaluate(tree: Expr) -> Value:
    """Evaluate ``tree`` bottom-up: left operand, right operand, then the operator.

    The walk keeps its own stack, so long operator chains are not limited by
    the interpreter's recursion depth.
    """
    work: list[tuple[Expr, bool]] = [(tree, False)]
    results: list[Value] = []
    while work:
        node, operands_ready = work.pop()
        if isinstance(node, Leaf):
            results.append(node.value)
        elif isinstance(node, Branch):
            if operands_ready:
                right = results.pop() if node.right is not None else None
                left = results.pop()
                results.append(_apply(node, left, right))
            else:
                work.append((node, True))
                if node.right is not None:
                    work.append((node.right, False))
                work.append((node.left, False))
        else:
            raise TypeError(f"Unsupported expression node: {type(node)!r}")
    return results.pop()
