"""
Component 6: Problem Loader

Reads and writes already-ground planning problems as YAML. This is an
exchange format for the command line, not a PDDL parser: actions arrive
fully instantiated.

Domain file:
    domain: blocks
    requirements: [":strips", ":negative-preconditions"]
    actions:
      - name: pickup(A)
        precondition: [[clear, A], [ontable, A], [handempty]]
        negative_precondition: []
        add: [[holding, A]]
        delete: [[clear, A], [ontable, A], [handempty]]

Problem file:
    problem: blocks-01
    requirements: []
    init: ["clear A", "ontable A", "handempty"]
    goal: [[holding, A]]
    negative_goal: []

A fact is either a whitespace-separated string ("on A B"), a parenthesized
string ("(on A B)") or a list ([clear, A]). YAML reads bare on/off/yes/no
as booleans, so such words must be quoted inside lists ["on", A, B].
dump_problem writes every fact as a list, so arguments containing spaces
or parentheses survive a write/read cycle.

Author: PRW Development Team
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import yaml

from component_1_state_model import Action, Condition, Fact, State
from component_15_logging_config import get_logger
from component_3_planning_problem import PlanningProblem, RequirementKey
from prw_exceptions import PRWException, ProblemDefinitionError, wrap_exception

logger = get_logger(__name__)

PathLike = Union[str, Path]


def parse_fact(raw: Any, source: str = "<memory>") -> Fact:
    """
    Convert a YAML fact into a tuple of strings.

    Raises:
        ProblemDefinitionError: If raw is neither a list nor a string, or empty
    """
    if isinstance(raw, str):
        parts = raw.strip().strip("()").split()
    elif isinstance(raw, (list, tuple)):
        if any(isinstance(p, bool) for p in raw):
            raise ProblemDefinitionError(
                f"Fact {raw!r} contains a boolean; quote words like on/off/yes/no",
                source=source,
            )
        parts = [str(p) for p in raw]
    else:
        raise ProblemDefinitionError(
            f"Fact must be a list or a string, got {type(raw).__name__}: {raw!r}",
            source=source,
        )
    if not parts:
        raise ProblemDefinitionError("Empty fact", source=source)
    return tuple(parts)


def _parse_facts(data: Dict[str, Any], key: str, source: str) -> List[Fact]:
    raw = data.get(key) or []
    if not isinstance(raw, list):
        raise ProblemDefinitionError(
            f"'{key}' must be a list of facts", source=source, context={"key": key}
        )
    return [parse_fact(item, source) for item in raw]


def _parse_requirements(data: Dict[str, Any], source: str) -> List[RequirementKey]:
    raw = data.get("requirements") or []
    if not isinstance(raw, list):
        raise ProblemDefinitionError("'requirements' must be a list", source=source)
    try:
        return [RequirementKey.from_keyword(item) for item in raw]
    except ProblemDefinitionError as e:
        e.context.setdefault("source", source)
        raise


def _read_yaml(path: PathLike) -> Dict[str, Any]:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise wrap_exception(
            e, ProblemDefinitionError, "Invalid YAML", source=str(path)
        ) from e
    except OSError as e:
        raise wrap_exception(
            e, ProblemDefinitionError, "Cannot read file", source=str(path)
        ) from e

    if not isinstance(data, dict):
        raise ProblemDefinitionError(
            "Top level must be a mapping", source=str(path)
        )
    return data


def parse_action(data: Any, source: str = "<memory>") -> Action:
    """Build a ground Action from its YAML mapping."""
    if not isinstance(data, dict) or "name" not in data:
        raise ProblemDefinitionError(
            "Each action must be a mapping with a 'name'", source=source
        )
    return Action.strips(
        name=str(data["name"]),
        preconditions=_parse_facts(data, "precondition", source),
        negative_preconditions=_parse_facts(data, "negative_precondition", source),
        add_effects=_parse_facts(data, "add", source),
        delete_effects=_parse_facts(data, "delete", source),
    )


def build_problem(
    domain: Dict[str, Any],
    problem: Dict[str, Any],
    domain_source: str = "<domain>",
    problem_source: str = "<problem>",
) -> PlanningProblem:
    """
    Assemble a PlanningProblem from already-loaded domain/problem mappings.

    Requirements are the union of both files; ":strips" when none is given.
    """
    raw_actions = domain.get("actions") or []
    if not isinstance(raw_actions, list):
        raise ProblemDefinitionError("'actions' must be a list", source=domain_source)
    if "init" not in problem:
        raise ProblemDefinitionError("Missing 'init' section", source=problem_source)
    if "goal" not in problem and "negative_goal" not in problem:
        raise ProblemDefinitionError("Missing 'goal' section", source=problem_source)

    actions = [parse_action(item, domain_source) for item in raw_actions]
    requirements = set(_parse_requirements(domain, domain_source))
    requirements |= set(_parse_requirements(problem, problem_source))
    if not requirements:
        requirements = {RequirementKey.STRIPS}

    name = str(problem.get("problem") or Path(problem_source).stem)

    return PlanningProblem(
        initial_state=State(propositions=_parse_facts(problem, "init", problem_source)),
        goal=Condition.of(
            _parse_facts(problem, "goal", problem_source),
            _parse_facts(problem, "negative_goal", problem_source),
        ),
        actions=actions,
        requirements=frozenset(requirements),
        name=name,
    )


def load_problem(domain_path: PathLike, problem_path: PathLike) -> PlanningProblem:
    """
    Load a ground problem from a domain file and a problem file.

    Raises:
        ProblemDefinitionError: On unreadable files, YAML errors or bad structure
    """
    logger.info(
        "Loading problem",
        extra={"domain": str(domain_path), "problem": str(problem_path)},
    )
    domain = _read_yaml(domain_path)
    problem_data = _read_yaml(problem_path)

    try:
        problem = build_problem(
            domain, problem_data, str(domain_path), str(problem_path)
        )
    except PRWException:
        raise
    except (TypeError, ValueError) as e:
        raise wrap_exception(
            e, ProblemDefinitionError, "Malformed problem", source=str(problem_path)
        ) from e

    logger.info(
        f"Loaded {problem}",
        extra={"requirements": sorted(r.value for r in problem.requirements)},
    )
    return problem


# ============================================================================
# Writing
# ============================================================================


def _dump_facts(facts: Iterable[Fact]) -> List[List[str]]:
    return [list(fact) for fact in sorted(facts)]


def problem_to_yaml_data(problem: PlanningProblem) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Inverse of build_problem: (domain mapping, problem mapping)."""
    requirements = sorted(r.value for r in problem.requirements)
    domain = {
        "domain": problem.name,
        "requirements": requirements,
        "actions": [
            {
                "name": action.name,
                "precondition": _dump_facts(action.precondition.positive),
                "negative_precondition": _dump_facts(action.precondition.negative),
                "add": _dump_facts(action.effect.add),
                "delete": _dump_facts(action.effect.delete),
            }
            for action in problem.actions
        ],
    }
    problem_data = {
        "problem": problem.name,
        "init": _dump_facts(problem.initial_state.propositions),
        "goal": _dump_facts(problem.goal.positive),
        "negative_goal": _dump_facts(problem.goal.negative),
    }
    return domain, problem_data


def dump_problem(
    problem: PlanningProblem,
    domain_path: PathLike,
    problem_path: PathLike,
    encoding: Optional[str] = "utf-8",
) -> None:
    """Write problem as a domain file and a problem file."""
    domain, problem_data = problem_to_yaml_data(problem)
    for path, data in ((domain_path, domain), (problem_path, problem_data)):
        with open(path, "w", encoding=encoding) as f:
            yaml.safe_dump(data, f, sort_keys=False)
    logger.debug(
        "Problem written",
        extra={"domain": str(domain_path), "problem": str(problem_path)},
    )
