from __future__ import annotations

import math
from dataclasses import dataclass

from .. import config, logging
from .graph_data import GraphData, Node

_INITIAL_RADIUS = 10.0
_INITIAL_ANGLE = math.pi * (3.0 - math.sqrt(5.0))
FALLBACK_SIZE = (500.0, 400.0)


@dataclass(frozen=True)
class LayoutSettings:
    link_distance: float = 120.0
    charge_strength: float = -200.0
    center_strength: float = 1.0
    collide_radius: float = 25.0
    collide_strength: float = 0.7
    velocity_decay: float = 0.4
    alpha_min: float = 0.001
    alpha_decay: float = 1.0 - 0.001 ** (1.0 / 300.0)
    warmup_steps: int = 50
    drag_alpha_target: float = 0.3

    @classmethod
    def from_config(cls) -> "LayoutSettings":
        return cls(
            link_distance=config.LINK_DISTANCE,
            charge_strength=config.CHARGE_STRENGTH,
            center_strength=config.CENTER_STRENGTH,
            collide_radius=config.COLLIDE_RADIUS,
            collide_strength=config.COLLIDE_STRENGTH,
            velocity_decay=config.VELOCITY_DECAY,
            alpha_min=config.ALPHA_MIN,
            alpha_decay=config.ALPHA_DECAY,
            warmup_steps=config.WARMUP_STEPS,
            drag_alpha_target=config.DRAG_ALPHA_TARGET,
        )


def _jiggle(i: int, j: int) -> tuple[float, float]:
    # Deterministic micro-offset so coincident nodes can separate.
    ax = ((i * 37 + j * 17) % 11) - 5
    ay = ((i * 53 + j * 29) % 13) - 6
    return (ax or 1) * 1e-6, (ay or -1) * 1e-6


class ForceLayout:
    """Fixed-step force relaxation over the nodes of a GraphData.

    Energy follows the alpha model: every step moves ``alpha`` toward
    ``alpha_target`` by ``alpha_decay``; once it drops under ``alpha_min``
    with a zero target the engine is at rest and ``step`` does nothing.
    """

    def __init__(
        self,
        graph: GraphData,
        width: float = 0.0,
        height: float = 0.0,
        settings: LayoutSettings | None = None,
    ) -> None:
        self.graph = graph
        self.settings = settings or LayoutSettings.from_config()
        self.alpha = 1.0
        self.alpha_target = 0.0
        self.running = True
        self.steps = 0
        self.center_x = 0.0
        self.center_y = 0.0
        self._set_center(width, height)

        count = [0] * len(graph.nodes)
        for e in graph.edges:
            count[e.source] += 1
            count[e.target] += 1
        self._link_strength: list[float] = []
        self._link_bias: list[float] = []
        self._link_distance: list[float] = []
        for e in graph.edges:
            cs, ct = count[e.source], count[e.target]
            self._link_strength.append(1.0 / max(1, min(cs, ct)))
            self._link_bias.append(cs / float(cs + ct))
            self._link_distance.append(self.settings.link_distance / math.sqrt(max(1, e.weight)))

        for n in graph.nodes:
            r = _INITIAL_RADIUS * math.sqrt(0.5 + n.index)
            a = n.index * _INITIAL_ANGLE
            n.x = r * math.cos(a)
            n.y = r * math.sin(a)
            n.vx = 0.0
            n.vy = 0.0

    @property
    def energy(self) -> float:
        return self.alpha

    @property
    def is_active(self) -> bool:
        return self.running

    def _set_center(self, width: float, height: float) -> None:
        w, h = float(width or 0), float(height or 0)
        if w < 1 or h < 1:
            w, h = FALLBACK_SIZE
        self.center_x = w / 2.0
        self.center_y = h / 2.0

    def restart(self, alpha: float | None = None) -> None:
        if alpha is not None:
            self.alpha = float(alpha)
        self.running = True

    def reheat(self, alpha: float) -> None:
        logging.trace("reheat", alpha)
        self.restart(alpha)

    def set_alpha_target(self, target: float) -> None:
        self.alpha_target = float(target)

    def warm_up(self, steps: int | None = None) -> None:
        n = self.settings.warmup_steps if steps is None else int(steps)
        for _ in range(max(0, n)):
            self._tick()
        logging.debug("warm-up done", "steps=", n, "alpha=", round(self.alpha, 4))

    def recenter(self, width: float, height: float) -> None:
        self._set_center(width, height)

    def resize(self, width: float, height: float) -> None:
        self._set_center(width, height)
        logging.debug("resize", "center=", (self.center_x, self.center_y))
        self.restart(1.0)

    def pin(self, index: int, x: float, y: float) -> None:
        node = self.graph.nodes[index]
        node.fx = float(x)
        node.fy = float(y)
        self.alpha_target = self.settings.drag_alpha_target
        self.restart()

    def release(self, index: int) -> None:
        node = self.graph.nodes[index]
        node.fx = None
        node.fy = None
        self.alpha_target = 0.0

    def step(self) -> bool:
        if not self.running:
            return False
        self._tick()
        if self.alpha < self.settings.alpha_min:
            self.running = False
            logging.trace("at rest", "steps=", self.steps)
        return True

    def _tick(self) -> None:
        s = self.settings
        self.alpha += (self.alpha_target - self.alpha) * s.alpha_decay
        nodes = self.graph.nodes
        if not nodes:
            return
        self._apply_links(nodes)
        self._apply_charge(nodes)
        self._apply_center(nodes)
        self._apply_collide(nodes)

        keep = 1.0 - s.velocity_decay
        for n in nodes:
            if n.fx is None:
                n.vx *= keep
                n.x += n.vx
            else:
                n.x = n.fx
                n.vx = 0.0
            if n.fy is None:
                n.vy *= keep
                n.y += n.vy
            else:
                n.y = n.fy
                n.vy = 0.0
        self.steps += 1

    def _apply_links(self, nodes: list[Node]) -> None:
        alpha = self.alpha
        for k, e in enumerate(self.graph.edges):
            src = nodes[e.source]
            tgt = nodes[e.target]
            x = tgt.x + tgt.vx - src.x - src.vx
            y = tgt.y + tgt.vy - src.y - src.vy
            if x == 0 and y == 0:
                x, y = _jiggle(e.source, e.target)
            dist = math.sqrt(x * x + y * y)
            f = (dist - self._link_distance[k]) / dist * alpha * self._link_strength[k]
            x *= f
            y *= f
            b = self._link_bias[k]
            tgt.vx -= x * b
            tgt.vy -= y * b
            src.vx += x * (1.0 - b)
            src.vy += y * (1.0 - b)

    def _apply_charge(self, nodes: list[Node]) -> None:
        strength = self.settings.charge_strength * self.alpha
        if strength == 0:
            return
        count = len(nodes)
        for i in range(count):
            a = nodes[i]
            for j in range(i + 1, count):
                b = nodes[j]
                x = b.x - a.x
                y = b.y - a.y
                if x == 0 and y == 0:
                    x, y = _jiggle(i, j)
                d2 = max(1.0, x * x + y * y)
                w = strength / d2
                a.vx += x * w
                a.vy += y * w
                b.vx -= x * w
                b.vy -= y * w

    def _apply_center(self, nodes: list[Node]) -> None:
        k = self.settings.center_strength
        if k == 0:
            return
        sx = sum(n.x for n in nodes) / len(nodes)
        sy = sum(n.y for n in nodes) / len(nodes)
        dx = (sx - self.center_x) * k
        dy = (sy - self.center_y) * k
        for n in nodes:
            n.x -= dx
            n.y -= dy

    def _apply_collide(self, nodes: list[Node]) -> None:
        radius = self.settings.collide_radius
        strength = self.settings.collide_strength
        if radius <= 0 or strength <= 0:
            return
        min_d = radius * 2.0
        min_d2 = min_d * min_d
        count = len(nodes)
        for i in range(count):
            a = nodes[i]
            xi = a.x + a.vx
            yi = a.y + a.vy
            for j in range(i + 1, count):
                b = nodes[j]
                x = xi - (b.x + b.vx)
                y = yi - (b.y + b.vy)
                d2 = x * x + y * y
                if d2 >= min_d2:
                    continue
                if x == 0 and y == 0:
                    x, y = _jiggle(i, j)
                    d2 = x * x + y * y
                d = math.sqrt(d2)
                f = (min_d - d) / d * strength * 0.5
                a.vx += x * f
                a.vy += y * f
                b.vx -= x * f
                b.vy -= y * f
