"""Layered exclusion rules for combining rule sets anchored at different directories."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .base_rules import BaseExclusionRules


@dataclass(frozen=True)
class RuleLayer:
    """A rule set together with the directory it is anchored at.

    Rules read from an ignore file apply to paths relative to the directory that
    holds the file. A layer translates a root-relative path into that local form.

    Attributes:
        rules: The rule set of this layer.
        anchor: Root-relative directory the rules belong to ("" for the root itself).
            Paths outside the anchor are not evaluated by this layer.
        prefix: Text prepended to the localized path. Used for ignore files found
            above the root, whose patterns see the root as a subdirectory.

    Example:
        >>> from copytree.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> layer = RuleLayer(GitIgnoreExclusionRules(), anchor="src")
        >>> layer.localize("src/pkg/mod.py")
        'pkg/mod.py'
        >>> print(layer.localize("docs/index.md"))
        None
        >>> RuleLayer(GitIgnoreExclusionRules(), prefix="project/").localize("README.md")
        'project/README.md'
    """

    rules: BaseExclusionRules
    anchor: str = ""
    prefix: str = ""

    def localize(self, path: str) -> Optional[str]:
        if self.anchor:
            if not path.startswith(self.anchor + "/"):
                return None
            path = path[len(self.anchor) + 1 :]  # noqa: E203
        return self.prefix + path


class LayeredExclusionRules(BaseExclusionRules):
    """Exclusion rules evaluated as an ordered stack of layers.

    Layers are evaluated from first to last and the last layer with an opinion
    decides, which reproduces Git's precedence: patterns from a deeper ignore file
    override those of its ancestors, and a negated pattern re-includes a path an
    earlier layer excluded.

    Pinned layers are always evaluated after the regular layers, no matter how many
    layers are pushed later. They hold rules that must win everywhere, such as
    patterns given on the command line.

    Instances are immutable: ``with_layer()`` returns a new stack, so a recursive
    walk can extend the stack for one subtree without affecting its siblings.

    Attributes:
        layers (Tuple[RuleLayer, ...]): Regular layers in evaluation order.
        pinned (Tuple[RuleLayer, ...]): Layers evaluated after all regular layers.

    Example:
        >>> from copytree.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> root = RuleLayer(GitIgnoreExclusionRules.from_lines(["*.log"]))
        >>> stack = LayeredExclusionRules([root])
        >>> stack.exclude("src/debug.log")
        True
        >>> nested = RuleLayer(GitIgnoreExclusionRules.from_lines(["!debug.log"]), anchor="src")
        >>> stack.with_layer(nested).exclude("src/debug.log")
        False
        >>> stack.exclude("src/debug.log")
        True
    """

    def __init__(self, layers: Sequence[RuleLayer] = (), pinned: Sequence[RuleLayer] = ()):
        """Initialize the layered rules.

        Args:
            layers: Regular layers, lowest precedence first.
            pinned: Layers that are always evaluated last.

        Raises:
            TypeError: If any layer's rules don't implement BaseExclusionRules.
        """
        for i, layer in enumerate(tuple(layers) + tuple(pinned)):
            if not isinstance(layer, RuleLayer) or not isinstance(layer.rules, BaseExclusionRules):
                raise TypeError(f"Layer at index {i} must be a RuleLayer over BaseExclusionRules, got {layer!r}")

        self.layers: Tuple[RuleLayer, ...] = tuple(layers)
        self.pinned: Tuple[RuleLayer, ...] = tuple(pinned)

    def match(self, path: str) -> Optional[bool]:
        """Evaluate a root-relative path against every layer.

        Args:
            path: Root-relative, slash-separated path (directories with trailing slash).

        Returns:
            The verdict of the last layer that matched, or None if none matched.
        """
        verdict: Optional[bool] = None
        for layer in self.layers + self.pinned:
            local = layer.localize(path)
            if local is None:
                continue
            layer_verdict = layer.rules.match(local)
            if layer_verdict is not None:
                verdict = layer_verdict
        return verdict

    def has_rules(self) -> bool:
        return any(layer.rules.has_rules() for layer in self.layers + self.pinned)

    def with_layer(self, layer: RuleLayer) -> "LayeredExclusionRules":
        """Return a new stack with a layer added after the current regular layers.

        Args:
            layer: The layer to push.

        Returns:
            A new LayeredExclusionRules; this instance is left unchanged.
        """
        return LayeredExclusionRules(self.layers + (layer,), self.pinned)
