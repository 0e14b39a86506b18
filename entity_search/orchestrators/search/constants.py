"""Reserved facet identifiers shared with the backend and with legacy clients."""

# Facet name older clients request for per-entity-type counts.
ENTITY_FACET = "entity"
ENTITY_FACET_DISPLAY_NAME = "Type"

# Facet under which the backend reports true per-entity-type hit counts.
INDEX_VIRTUAL_FIELD = "_entityType"

# Joins the parts of a compound aggregation key, e.g. "platform␞urn:li:dataPlatform:hive".
AGGREGATION_SEPARATOR_CHAR = "␞"

URN_PREFIX = "urn:"
