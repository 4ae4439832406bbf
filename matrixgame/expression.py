"""Polynomial expressions in sum-of-products normal form.

Payoff equations of matrix games are polynomials in the players' probability variables with rational
coefficients. Expression keeps them as a mapping from monomials to exact coefficients, so like terms are
collected and constants folded on every operation.
"""

import re
from fractions import Fraction
from numbers import Number
from typing import Dict, Optional, Tuple, Union

import numpy as np

# monomial: sorted tuple of (name, power) pairs; () is the constant monomial
Monomial = Tuple[Tuple[str, int], ...]

_TOKEN = re.compile(r'\s*(?:'
                    r'(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)'
                    r'|(?P<name>[A-Za-z_][A-Za-z_0-9]*)'
                    r'|(?P<op>\*\*|[-+*/^()]))')
_NAME = re.compile(r'^[A-Za-z_][A-Za-z_0-9]*$')


def to_fraction(value) -> Fraction:
    """Convert a real number to an exact Fraction. Floats are taken at their shortest decimal representation,
    so 0.1 becomes 1/10 rather than the nearest binary fraction."""
    if isinstance(value, Fraction):
        return value
    if isinstance(value, (bool, np.bool_)):
        return Fraction(int(value))
    if isinstance(value, (int, np.integer)):
        return Fraction(int(value))
    if isinstance(value, (float, np.floating)):
        if not np.isfinite(value):
            raise ValueError(f'Cannot represent {value} as an exact number.')
        return Fraction(repr(float(value)))
    if isinstance(value, Number):
        return Fraction(value)
    raise TypeError(f'Expected a real number, got {type(value).__name__}.')


def _normalize(terms: Dict[Monomial, Fraction]) -> Dict[Monomial, Fraction]:
    return {monomial: coefficient for monomial, coefficient in terms.items() if coefficient != 0}


def _multiply_monomials(left: Monomial, right: Monomial) -> Monomial:
    powers = dict(left)
    for name, power in right:
        powers[name] = powers.get(name, 0) + power
    return tuple(sorted(powers.items()))


def _format_coefficient(coefficient: Fraction) -> str:
    if coefficient.denominator == 1:
        return str(coefficient.numerator)
    return f'{coefficient.numerator}/{coefficient.denominator}'


class Expression:
    """A polynomial with exact rational coefficients.

    Can be created from a number, a string, or another Expression:

    >>> e = Expression('3 * p * q + 2 * (1 - p) * q')
    >>> str(e)
    'p*q + 2*q'
    >>> str(e.diff('p'))
    'q'

    Strings may contain numbers (integers, decimals, scientific notation), names, parentheses, the operators
    + - * / and integer powers written as ** or ^. Division is only possible by constants.
    """

    __slots__ = ('_terms',)

    def __init__(self, value: Union['Expression', str, Number] = 0) -> None:
        if isinstance(value, Expression):
            terms = dict(value._terms)
        elif isinstance(value, str):
            terms = _Parser(value).parse()._terms
        else:
            terms = {(): to_fraction(value)}
        self._terms = _normalize(terms)

    @classmethod
    def symbol(cls, name: str) -> 'Expression':
        """A single variable."""
        if not _NAME.match(name):
            raise ValueError(f'"{name}" is not a valid variable name.')
        return cls._from_terms({((name, 1),): Fraction(1)})

    @classmethod
    def _from_terms(cls, terms: Dict[Monomial, Fraction]) -> 'Expression':
        expression = cls.__new__(cls)
        expression._terms = _normalize(terms)
        return expression

    @staticmethod
    def _coerce(other) -> Optional['Expression']:
        if isinstance(other, Expression):
            return other
        if isinstance(other, (str, Number, np.number)):
            return Expression(other)
        return None

    # %% properties

    @property
    def terms(self) -> Dict[Monomial, Fraction]:
        """Copy of the monomial -> coefficient mapping."""
        return dict(self._terms)

    @property
    def free_symbols(self) -> frozenset:
        return frozenset(name for monomial in self._terms for name, _ in monomial)

    @property
    def is_constant(self) -> bool:
        return all(monomial == () for monomial in self._terms)

    @property
    def is_zero(self) -> bool:
        return not self._terms

    @property
    def value(self) -> Fraction:
        """Exact value of a constant expression."""
        if not self.is_constant:
            raise ValueError(f'Expression "{self}" has free variables {sorted(self.free_symbols)}.')
        return self._terms.get((), Fraction(0))

    def degree(self, symbol: Optional[str] = None) -> int:
        """Total degree, or the degree in a single variable. The zero polynomial has degree 0."""
        if symbol is None:
            return max((sum(power for _, power in monomial) for monomial in self._terms), default=0)
        return max((dict(monomial).get(symbol, 0) for monomial in self._terms), default=0)

    def coefficient(self, symbol: str, power: int = 1) -> 'Expression':
        """Collect the terms containing symbol**power exactly and divide that factor out."""
        terms = {}
        for monomial, coefficient in self._terms.items():
            powers = dict(monomial)
            if powers.get(symbol, 0) != power:
                continue
            powers.pop(symbol, None)
            terms[tuple(sorted(powers.items()))] = coefficient
        return Expression._from_terms(terms)

    # %% arithmetic

    def __add__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        terms = dict(self._terms)
        for monomial, coefficient in other._terms.items():
            terms[monomial] = terms.get(monomial, Fraction(0)) + coefficient
        return Expression._from_terms(terms)

    __radd__ = __add__

    def __neg__(self):
        return Expression._from_terms({monomial: -coefficient for monomial, coefficient in self._terms.items()})

    def __pos__(self):
        return self

    def __sub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other - self

    def __mul__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        terms = {}
        for left, left_coefficient in self._terms.items():
            for right, right_coefficient in other._terms.items():
                monomial = _multiply_monomials(left, right)
                terms[monomial] = terms.get(monomial, Fraction(0)) + left_coefficient * right_coefficient
        return Expression._from_terms(terms)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        if not other.is_constant:
            raise ValueError(f'Cannot divide by the non-constant expression "{other}".')
        if other.is_zero:
            raise ZeroDivisionError(f'Division of "{self}" by zero.')
        return self * Expression(1 / other.value)

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other / self

    def __pow__(self, exponent):
        if isinstance(exponent, Expression):
            if not exponent.is_constant:
                raise ValueError(f'Exponent "{exponent}" is not constant.')
            exponent = exponent.value
        if exponent != int(exponent) or exponent < 0:
            raise ValueError(f'Only non-negative integer powers are supported, got {exponent}.')
        result = Expression(1)
        for _ in range(int(exponent)):
            result = result * self
        return result

    # %% calculus and substitution

    def diff(self, symbol: str) -> 'Expression':
        """First derivative with respect to a variable."""
        terms = {}
        for monomial, coefficient in self._terms.items():
            powers = dict(monomial)
            power = powers.get(symbol, 0)
            if power == 0:
                continue
            if power == 1:
                del powers[symbol]
            else:
                powers[symbol] = power - 1
            reduced = tuple(sorted(powers.items()))
            terms[reduced] = terms.get(reduced, Fraction(0)) + coefficient * power
        return Expression._from_terms(terms)

    def subs(self, substitutions: Optional[dict] = None, **kwargs) -> 'Expression':
        """Replace variables by numbers, strings or expressions. All replacements happen simultaneously."""
        substitutions = {**(substitutions or {}), **kwargs}
        replacements = {name: Expression(value) for name, value in substitutions.items()}
        result = Expression(0)
        for monomial, coefficient in self._terms.items():
            term = Expression(coefficient)
            for name, power in monomial:
                factor = replacements.get(name, None)
                if factor is None:
                    factor = Expression.symbol(name)
                term = term * factor ** power
            result = result + term
        return result

    def evaluate(self, substitutions: Optional[dict] = None, **kwargs) -> Fraction:
        """Substitute numbers for all variables and return the exact value."""
        return self.subs(substitutions, **kwargs).value

    def solve(self, symbol: str) -> 'Expression':
        """Solve the linear equation self == 0 for symbol."""
        if self.degree(symbol) != 1:
            raise ValueError(f'"{self} = 0" is not a linear equation in {symbol}.')
        slope = self.coefficient(symbol, 1)
        if not slope.is_constant:
            raise ValueError(f'Coefficient "{slope}" of {symbol} is not constant.')
        return -self.coefficient(symbol, 0) / slope

    def to_sympy(self):
        """Convert to a sympy expression."""
        try:
            import sympy as sp
        except ModuleNotFoundError:
            raise ModuleNotFoundError("Conversion to sympy requires package 'sympy'.")

        result = sp.Integer(0)
        for monomial, coefficient in self._terms.items():
            term = sp.Rational(coefficient.numerator, coefficient.denominator)
            for name, power in monomial:
                term *= sp.Symbol(name) ** power
            result += term
        return result

    # %% conversion and comparison

    def __float__(self):
        return float(self.value)

    def __eq__(self, other):
        try:
            other = self._coerce(other)
        except (ValueError, TypeError):
            return False
        if other is None:
            return NotImplemented
        return self._terms == other._terms

    def __hash__(self):
        # constants hash like the numbers they equal
        if self.is_constant:
            return hash(self.value)
        return hash(frozenset(self._terms.items()))

    def __str__(self):
        if not self._terms:
            return '0'
        ordered = sorted(self._terms.items(),
                         key=lambda item: (-sum(power for _, power in item[0]), item[0]))
        string = ''
        for monomial, coefficient in ordered:
            factors = '*'.join(name if power == 1 else f'{name}**{power}' for name, power in monomial)
            magnitude = abs(coefficient)
            if not factors:
                term = _format_coefficient(magnitude)
            elif magnitude == 1:
                term = factors
            else:
                term = f'{_format_coefficient(magnitude)}*{factors}'
            if not string:
                string = f'-{term}' if coefficient < 0 else term
            else:
                string += f' - {term}' if coefficient < 0 else f' + {term}'
        return string

    def __repr__(self):
        return f"Expression('{self}')"


class _Parser:
    """Recursive descent parser producing an Expression.

    expr  := term (('+' | '-') term)*
    term  := unary (('*' | '/') unary)*
    unary := ('+' | '-') unary | power
    power := atom (('**' | '^') unary)?
    atom  := number | name | '(' expr ')'
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = self._tokenize(text)
        self.position = 0

    def _tokenize(self, text):
        tokens = []
        index = 0
        stripped_length = len(text.rstrip())
        while index < stripped_length:
            match = _TOKEN.match(text, index)
            if match is None or match.end() == index:
                raise ValueError(f'Cannot parse expression "{text}": unexpected character at position {index}.')
            kind = match.lastgroup
            tokens.append((kind, match.group(kind)))
            index = match.end()
        return tokens

    def _peek(self):
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None, None

    def _next(self):
        token = self._peek()
        self.position += 1
        return token

    def _fail(self, reason):
        raise ValueError(f'Cannot parse expression "{self.text}": {reason}.')

    def parse(self) -> Expression:
        if not self.tokens:
            self._fail('expression is empty')
        expression = self._expr()
        if self.position != len(self.tokens):
            self._fail(f'unexpected "{self._peek()[1]}"')
        return expression

    def _expr(self):
        result = self._term()
        while self._peek() in (('op', '+'), ('op', '-')):
            _, op = self._next()
            right = self._term()
            result = result + right if op == '+' else result - right
        return result

    def _term(self):
        result = self._unary()
        while self._peek() in (('op', '*'), ('op', '/')):
            _, op = self._next()
            right = self._unary()
            result = result * right if op == '*' else result / right
        return result

    def _unary(self):
        if self._peek() == ('op', '-'):
            self._next()
            return -self._unary()
        if self._peek() == ('op', '+'):
            self._next()
            return self._unary()
        return self._power()

    def _power(self):
        base = self._atom()
        if self._peek() in (('op', '**'), ('op', '^')):
            self._next()
            exponent = self._unary()
            return base ** exponent
        return base

    def _atom(self):
        kind, token = self._next()
        if kind == 'number':
            return Expression(Fraction(token))
        if kind == 'name':
            return Expression.symbol(token)
        if (kind, token) == ('op', '('):
            inner = self._expr()
            if self._next() != ('op', ')'):
                self._fail('missing ")"')
            return inner
        if kind is None:
            self._fail('unexpected end of input')
        self._fail(f'unexpected "{token}"')
