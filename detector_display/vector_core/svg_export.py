from __future__ import annotations

from typing import Dict, List, Optional, Tuple
from xml.sax.saxutils import escape, quoteattr

from detector_display.vector_core.models import Point2, SceneObject, Transform

Matrix = Tuple[float, float, float, float, float, float]

_IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def _compose(outer: Matrix, inner: Matrix) -> Matrix:
    a1, b1, c1, d1, e1, f1 = outer
    a2, b2, c2, d2, e2, f2 = inner
    return (
        a1 * a2 + c1 * b2,
        b1 * a2 + d1 * b2,
        a1 * c2 + c1 * d2,
        b1 * c2 + d1 * d2,
        a1 * e2 + c1 * f2 + e1,
        b1 * e2 + d1 * f2 + f1,
    )


def _apply(matrix: Matrix, x: float, y: float) -> Point2:
    a, b, c, d, e, f = matrix
    return (a * x + c * y + e, b * x + d * y + f)


def id_to_url(id_: str) -> str:
    return f"url(#{id_})"


class SvgExporter:
    def export(
        self,
        obj: SceneObject,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> str:
        header = ['xmlns="http://www.w3.org/2000/svg"']
        if width is not None and height is not None:
            header.insert(0, f'width="{width}" height="{height}"')
        view_box = self._view_box(obj)
        if view_box:
            header.append(f'viewBox="{view_box}"')

        lines = [f"<svg {' '.join(header)}>"]
        definitions = self._collect_definitions(obj)
        if definitions:
            lines.append("<defs>")
            for definition in definitions:
                lines.extend(self._export_node(definition))
            lines.append("</defs>")
        lines.extend(self._export_node(obj))
        lines.append("</svg>")
        return "\n".join(lines)

    def _collect_definitions(self, obj: SceneObject) -> List[SceneObject]:
        collected: List[SceneObject] = []
        seen = set()

        def visit(node: SceneObject) -> None:
            for definition in node.definitions:
                if definition.id not in seen:
                    seen.add(definition.id)
                    collected.append(definition)
                visit(definition)
            for child in node.children:
                visit(child)

        visit(obj)
        return collected

    def _view_box(self, obj: SceneObject) -> str:
        points = self._placed_points(obj, _IDENTITY)
        if not points:
            return ""
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        x0, x1 = min(xs), max(xs)
        y0, y1 = min(ys), max(ys)
        return f"{x0:g} {y0:g} {max(x1 - x0, 1e-9):g} {max(y1 - y0, 1e-9):g}"

    def _placed_points(self, node: SceneObject, parent: Matrix) -> List[Point2]:
        """Bounding box corners of the leaves, in document coordinates."""
        if not node.is_defined():
            return []
        matrix = _compose(parent, node.transform.matrix())
        if node.children:
            points: List[Point2] = []
            for child in node.children:
                points.extend(self._placed_points(child, matrix))
            return points
        if node.x_range is None or node.y_range is None:
            return []
        return [_apply(matrix, x, y) for x in node.x_range for y in node.y_range]

    def _attributes(self, node: SceneObject) -> Dict[str, str]:
        attrs: Dict[str, str] = {}
        if node.id:
            attrs["id"] = node.id
        if not node.fill.sterile:
            attrs["fill"] = node.fill.color or "none"
            if node.fill.opacity != 1.0:
                attrs["fill-opacity"] = f"{node.fill.opacity:g}"
        if not node.stroke.sterile and node.stroke.color:
            attrs["stroke"] = node.stroke.color
            attrs["stroke-width"] = f"{node.stroke.width:g}"
            if node.stroke.dasharray:
                attrs["stroke-dasharray"] = ",".join(str(v) for v in node.stroke.dasharray)
        if not node.transform.is_identity():
            attrs["transform"] = self._transform_attr(node.transform)
        # explicit attributes win over style derived ones
        attrs.update(node.attributes)
        return attrs

    def _export_node(self, node: SceneObject) -> List[str]:
        if not node.is_defined():
            return []
        attr_str = " ".join(f"{k}={quoteattr(v)}" for k, v in self._attributes(node).items())
        opening = f"<{node.tag} {attr_str}".strip()
        if node.text:
            body = "".join(escape(line) for line in node.text)
            return [f"{opening}>{body}</{node.tag}>"]
        if not node.children:
            return [f"{opening} />"]
        lines = [f"{opening}>"]
        for child in node.children:
            lines.extend(self._export_node(child))
        lines.append(f"</{node.tag}>")
        return lines

    def _transform_attr(self, transform: Transform) -> str:
        parts = []
        if transform.x or transform.y:
            parts.append(f"translate({transform.x:g},{transform.y:g})")
        if transform.rotation:
            parts.append(f"rotate({transform.rotation:g},{transform.rx:g},{transform.ry:g})")
        if transform.scale_x != 1.0 or transform.scale_y != 1.0:
            parts.append(f"scale({transform.scale_x:g},{transform.scale_y:g})")
        return " ".join(parts)
