"""
Lowest Terragrunt version allowed by a project's configuration.

Terragrunt configurations declare a constraint such as

    terragrunt_version_constraint = ">= 0.45, < 0.60"

in a *.hcl file. The constraint uses Terraform syntax; it is translated to a
packaging SpecifierSet and evaluated against the remote listing.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from tgenv.core.exceptions import MinRequiredError

logger = logging.getLogger(__name__)

_CONSTRAINT_RE = re.compile(r'^\s*terragrunt_version_constraint\s*=\s*"([^"]*)"', re.M)
_CLAUSE_RE = re.compile(r"^(~>|>=|<=|!=|>|<|=)?\s*v?([0-9][0-9A-Za-z.\-+]*)$")


def find_constraint(project_dir: Path) -> Optional[str]:
    """
    Find the terragrunt_version_constraint declared in a directory.

    Files are searched in name order; the first declaration wins.

    Args:
        project_dir: Directory containing Terragrunt configuration

    Returns:
        Constraint string, or None if none is declared
    """
    for hcl_file in sorted(Path(project_dir).glob("*.hcl")):
        try:
            content = hcl_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Skipping unreadable {hcl_file}: {e}")
            continue
        match = _CONSTRAINT_RE.search(content)
        if match:
            logger.debug(f"Found constraint '{match.group(1)}' in {hcl_file}")
            return match.group(1)
    return None


def to_specifier_set(constraint: str) -> SpecifierSet:
    """
    Translate a Terraform-style constraint into a SpecifierSet.

    Example:
        >>> str(to_specifier_set("~> 0.45.0, != 0.45.3"))
        '!=0.45.3,~=0.45.0'

    Raises:
        ValueError: If the constraint cannot be parsed
    """
    clauses = []
    for clause in constraint.split(","):
        clause = clause.strip()
        if not clause:
            continue
        match = _CLAUSE_RE.match(clause)
        if not match:
            raise ValueError(f"Unsupported constraint clause: '{clause}'")

        operator, version = match.group(1) or "=", match.group(2)
        if operator == "~>":
            # ~> 1 only pins the major; packaging's ~= needs two segments
            operator = "~=" if "." in version else ">="
        elif operator == "=":
            operator = "=="
        clauses.append(f"{operator}{version}")

    if not clauses:
        raise ValueError(f"Empty constraint: '{constraint}'")

    try:
        return SpecifierSet(",".join(clauses))
    except InvalidSpecifier as e:
        raise ValueError(f"Invalid constraint '{constraint}': {e}") from e


def min_required_version(versions: Iterable[str], project_dir: Path) -> str:
    """
    Lowest listed version satisfying the project's constraint.

    Args:
        versions: Candidate versions (any order)
        project_dir: Directory containing Terragrunt configuration

    Returns:
        The lowest satisfying version string, as listed

    Raises:
        MinRequiredError: If no constraint is declared, it cannot be parsed,
            or no listed version satisfies it
    """
    constraint = find_constraint(project_dir)
    if constraint is None:
        raise MinRequiredError(
            "min-required is currently not supported without a "
            f"terragrunt_version_constraint in {project_dir}"
        )

    try:
        specifiers = to_specifier_set(constraint)
    except ValueError as e:
        raise MinRequiredError(
            f"min-required is currently not supported for constraint "
            f"'{constraint}': {e}"
        ) from e

    candidates = []
    for version in versions:
        try:
            parsed = Version(version)
        except InvalidVersion:
            continue
        if parsed in specifiers:
            candidates.append((parsed, version))

    if not candidates:
        raise MinRequiredError(
            f"min-required is currently not supported: no version satisfies "
            f"'{constraint}'"
        )

    lowest = min(candidates)[1]
    logger.info(f"Minimum version satisfying '{constraint}': {lowest}")
    return lowest


__all__ = ["find_constraint", "to_specifier_set", "min_required_version"]
