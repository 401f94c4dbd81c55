"""Command line front end for erpcl."""
