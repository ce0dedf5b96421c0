"""db/repositories: one module per table; every function takes a psycopg2 connection."""
