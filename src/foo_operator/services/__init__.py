"""Service layer for the Foo Operator."""
