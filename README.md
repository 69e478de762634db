# crateinspect

A terminal browser for the dependencies of a Cargo project. It runs
`cargo metadata --format-version 1` in a project directory. It then shows the
dependencies of the workspace's first default member. For each dependency you
see its version, its size on disk, and its share of the total as a percentage
with a small bar chart. You can move through the tree, filter and sort.

## Installation

```
pip install .
```

`cargo` must be on your `PATH`. The screen is drawn with `blessed`.

## Usage

Start it inside a directory that holds a `Cargo.toml`:

```
crateinspect
```

or point it at a project:

```
crateinspect --path path/to/project
```

Options:

| Option | Meaning |
| --- | --- |
| `-p`, `--path` | Project directory to inspect (default `.`) |
| `-l`, `--license` | Print a short notice about distribution terms and exit |
| `-V`, `--version` | Print the version and exit |

The program shows an error on the bottom line of the screen in these cases:

- the directory has no `Cargo.toml`;
- `cargo` cannot be started;
- its output is not valid JSON.

It also shows an error there if the terminal is smaller than 120 columns by
25 rows. When the program quits, the last error is logged.

## Screen

- **Statistics.** The top panel shows the path you have walked, for example
  `root/serde/serde_derive`. It also shows the current crate's name, version,
  licence and description, and the count and total size of the listed
  dependencies.
- **Description and filter.** Below that is the description of the selected
  dependency, with the filter box next to it.
- **Tables.** The left table lists the current crate's dependencies. The right
  table lists the dependencies of the selected row.

Names of crates that have a documentation link are highlighted.

## Keys

| Key | Action |
| --- | --- |
| `Up` / `k`, `Down` / `j` | Move the selection |
| `Right` / `l` | Go into the selected dependency |
| `Left` | Go back to the parent package |
| `a` / `d` | Show all (transitive) or only direct dependencies |
| `f` or `/` | Enter the filter box; `Enter` or `Esc` leaves it |
| `c` | Clear the filter |
| `s` | Sorting menu: `s` size, `n` name, `v` version, `r` reverse, `Esc` cancel |
| `h` | Help; `Esc` or `c` closes it |
| `Enter` | Open the documentation of the selected crate in the web browser |
| `q` | Quit |

Filter box:

- The filter keeps the rows whose name contains the typed text. It is applied
  after every key.
- Inside the box, `Backspace`, `Delete`, `Left`, `Right`, `Home` and `End`
  edit the text.
- Pressing `q` quits the program even while the filter box is active.

Sorting:

- The default order is by size, largest first.
- Choosing a column keeps the current direction.

## Sizes

A crate's size is the size of its `.crate` archive in the local Cargo registry
cache. The archive's path is found from the package's manifest path: `/src/`
becomes `/cache/`, and `/Cargo.toml` becomes `.crate`. Crates without such an
archive show as 0 B, for example workspace members and path or git
dependencies. Sizes are shown in B, KB, MB or GB, divided by 1024 and rounded
down.

## Library use

You can also use the building blocks directly:

- `crateinspect.metadata.run_cargo_metadata(path)` returns the parsed JSON.
- `crateinspect.metadata.parse_metadata(document)` turns that JSON into a map
  of `crateinspect.state.Metadata` records and the root package id.
- `crateinspect.app.App.load(path)` returns a ready application together with
  the list of `crateinspect.errors.InspectorError` instances it met.

## Development

```
pip install -e ".[test]"
pytest
```