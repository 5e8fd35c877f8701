"""Domain layer: schemas, query records, errors and pure evaluation logic."""
