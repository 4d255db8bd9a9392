"""Source snippets embedded into generated extensions.

These are literal, reviewed function sources rather than code introspected
from this package, so that generated output only changes together with
HELPERS_VERSION. The generated module imports ``re`` and defines ``TOOLS``
before the snippets.

Host interface used by the snippets:
    context.register_game(game)
    context.register_mod_type(id, priority, is_supported, get_path, test, options)
    context.api.get_discovered_path(game_id)
    context.api.get_path(name)
    context.api.store_helper.find_by_app_id(ids) / find_by_name(names)
"""

HELPERS_VERSION = '1'

MOD_TYPE_PRIORITY = r'''
def mod_type_priority(priority):
    return {
        "high": 25,
        "low": 75,
    }[priority]
'''

PATH_PATTERN = r'''
def path_pattern(api, game, pattern):
    values = {
        "gamePath": api.get_discovered_path(game["id"]),
        "documents": api.get_path("documents"),
    }

    def replace(match):
        value = values.get(match.group(1))
        return match.group(0) if value is None else str(value)

    return re.sub(r"\{(\w+)\}", replace, pattern)
'''

QUERY_PATH = r'''
def make_find_game(api, game_spec):
    def query_path():
        discovery = game_spec["discovery"]
        entry = None
        if discovery.get("ids"):
            try:
                entry = api.store_helper.find_by_app_id(discovery["ids"])
            except LookupError:
                entry = None
        if entry is None and discovery.get("names"):
            entry = api.store_helper.find_by_name(discovery["names"])
        return None if entry is None else entry["gamePath"]

    return query_path
'''

QUERY_MOD_PATH = r'''
def make_get_mod_path(api, game_spec):
    def query_mod_path(*args):
        game = game_spec["game"]
        if game.get("modPathIsRelative") is not False:
            return game.get("modPath") or "."
        return path_pattern(api, game, game["modPath"])

    return query_mod_path
'''

REQUIRES_LAUNCHER = r'''
def requires_launcher(game_path):
    return None
'''

APPLY = r'''
def apply_game(context, game_spec):
    game = dict(game_spec["game"])
    game.update(
        queryPath=make_find_game(context.api, game_spec),
        queryModPath=make_get_mod_path(context.api, game_spec),
        requiresLauncher=requires_launcher,
        requiresCleanup=True,
        executable=lambda *args: game_spec["game"]["executable"],
        supportedTools=TOOLS,
    )
    context.register_game(game)

    for idx, mod_type in enumerate(game_spec.get("modTypes") or []):
        context.register_mod_type(
            mod_type["id"],
            mod_type_priority(mod_type["priority"]) + idx,
            lambda game_id: game_id == game_spec["game"]["id"],
            lambda game, target=mod_type["targetPath"]: path_pattern(context.api, game, target),
            lambda *args: False,
            {"name": mod_type["name"]},
        )
'''

HELPER_SOURCES = {
    'mod_type_priority_func': MOD_TYPE_PRIORITY,
    'path_pattern_func': PATH_PATTERN,
    'query_path_func': QUERY_PATH,
    'query_mod_path_func': QUERY_MOD_PATH,
    'requires_launcher_func': REQUIRES_LAUNCHER,
    'apply_func': APPLY,
}


def helper_slots() -> dict:
    """Slot values for all helper snippets, trimmed of surrounding blank lines."""
    return {slot: source.strip() for slot, source in HELPER_SOURCES.items()}
