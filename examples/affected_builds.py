"""Affected Builds Example for digraph.

Simulates a project with four libraries where lib1 depends on lib3, lib3
depends on lib4 and lib2 is independent. Libraries are rebuilt only when
their component (or one of their dependencies) changed since the last build.

Run with:
    python examples/affected_builds.py
"""

import logging

import digraph as dg

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger("affected_builds")

# -----------------------------------------------------------------------------
# Graph Setup
# -----------------------------------------------------------------------------

# The graph could be generated by statically analyzing imports in the project
project_graph = dg.DiGraph[str]()
project_graph.insert(
    dg.Vertex("lib1", payload={"component": "<lib3.MyLib3Component>hello lib1</lib3.MyLib3Component>"}),
    dg.Vertex("lib2", payload={"component": "<div>hello lib2</div>"}),
    dg.Vertex("lib3", payload={"component": "<MyLib3Component>hello lib3</MyLib3Component>"}),
    dg.Vertex("lib4", payload={"component": "<span>shared utilities</span>"}),
)

# lib1 depends on lib3: lib3 is adjacent to lib1
project_graph.add_edge("lib1", "lib3")
project_graph.add_edge("lib3", "lib4")


def bundle(library: dg.Vertex[str]) -> None:
    # A bundler such as webpack would run here
    logger.info(f"  bundling '{library.id}' ({len(library.payload['component'])} bytes)")


builder = dg.AffectedBuilder(project_graph, bundle, payload_key="component")


def build(step: str) -> None:
    logger.info(f"\n---- {step} ----")
    report = builder.build_affected("lib1")
    for library_id in report.cached:
        logger.info(f"  using CACHED version of '{library_id}'")


if __name__ == "__main__":
    if project_graph.has_cycles():
        msg = "The project graph contains a dependency cycle"
        raise SystemExit(msg)

    # Nothing is cached yet: lib4, lib3 then lib1 are built
    build("STEP 1")

    # Nothing changed: every library comes from the cache
    build("STEP 2")

    # lib1 uses lib3's component, so changing lib3 affects lib1 too
    logger.info("\nChanging lib3's content...")
    project_graph.mutate("lib3", {"component": "<MyLib3Component>hello affected lib3!</MyLib3Component>"})

    # lib4 stays cached, lib3 and lib1 are rebuilt in that order
    build("STEP 3")
