"""HTTP interface of the members bounded context."""
