"""
Gastrak web view

- Reads --latitude/--longitude/--data once at start-up (config.py)
- On every GET / re-reads the data file and its mtime (snapshot.py),
  builds the template values (context.py) and renders templates/index.html
- Serves ./static under /static
- collector.py fetches the gas price CSV the page displays
"""
