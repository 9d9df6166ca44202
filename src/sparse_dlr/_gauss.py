# Copyright (C) 2020-2022 Markus Wallerberger, Hiroshi Shinaoka, and others
# SPDX-License-Identifier: MIT
import numpy as np

import numpy.polynomial.chebyshev as np_chebyshev
import numpy.polynomial.legendre as np_legendre


class Rule:
    """Panel quadrature rule.

    Nodes ``x`` (ascending) and weights ``w`` on the interval ``[a, b]``, such
    that ``w @ f(x)`` approximates the integral of ``f`` against the weight
    function of the rule.  Composite rules are built by mapping one rule onto
    several adjacent panels.
    """
    def __init__(self, x, w, a=-1, b=1):
        self.x = np.asarray(x)
        self.w = np.asarray(w)
        self.a = a
        self.b = b

    def reseat(self, a, b):
        """Affinely map the rule onto the panel ``[a, b]``"""
        scale = (b - a) / (self.b - self.a)
        return Rule(a + scale * (self.x - self.a), scale * self.w, a, b)

    def piecewise(self, edges):
        """Composite rule with a copy of this rule on each panel"""
        edges = np.asarray(edges)
        if not (np.diff(edges) > 0).all():
            raise ValueError("panel edges must be strictly ascending")
        return Rule.join(*(self.reseat(a, b)
                           for a, b in zip(edges[:-1], edges[1:])))

    def reflect(self):
        """Mirror rule onto ``[-b, -a]``"""
        return Rule(-self.x[::-1], self.w[::-1], -self.b, -self.a)

    @staticmethod
    def join(*rules):
        """Concatenate rules on adjacent, ascending panels"""
        if not rules:
            return Rule((), ())
        for left, right in zip(rules[:-1], rules[1:]):
            if left.b != right.a:
                raise ValueError("rules must be on adjacent, ascending panels")
        return Rule(np.hstack([r.x for r in rules]),
                    np.hstack([r.w for r in rules]), rules[0].a, rules[-1].b)


def legendre(n):
    """Gauss-Legendre rule with ``n`` points on ``[-1, 1]``"""
    x, w = np_legendre.leggauss(n)
    return Rule(x, w)


def chebyshev(n):
    """Gauss-Chebyshev rule (Chebyshev nodes of the first kind).

    The weights are those for the weight function ``1/sqrt(1 - x**2)``; we
    mostly use this rule for its nodes, which are the interpolation points
    of choice for smooth functions on a panel.
    """
    x, w = np_chebyshev.chebgauss(n)
    return Rule(x[::-1].copy(), w[::-1].copy())
