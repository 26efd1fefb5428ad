from typing import Dict, Type

from maze_weaver.algo.aldous_broder import AldousBroderGenerator
from maze_weaver.algo.base import Generator
from maze_weaver.algo.dfs import RecursiveBacktracker
from maze_weaver.algo.eller import EllerGenerator
from maze_weaver.algo.kruskal import KruskalGenerator
from maze_weaver.algo.wilson import WilsonGenerator
from maze_weaver.core.errors import ConfigurationError
from maze_weaver.core.grid import Grid

GENERATORS: Dict[str, Type[Generator]] = {
    cls.name: cls
    for cls in (RecursiveBacktracker, KruskalGenerator, AldousBroderGenerator, WilsonGenerator, EllerGenerator)
}


def create_generator(name: str, grid: Grid, **kwargs) -> Generator:
    try:
        cls = GENERATORS[name]
    except KeyError:
        raise ConfigurationError(f"Unknown algorithm '{name}', expected one of {', '.join(GENERATORS)}") from None
    return cls(grid, **kwargs)
