"""Discord platform binding: client, command registration and responder."""
