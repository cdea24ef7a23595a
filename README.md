# tasky

A personal to-do manager for the terminal. Tasks are kept in a local SQLite
database, and each one has a title, an optional description, a priority, a
status (pending or done) and an optional due date. Its output messages are in
Korean.

## Installation

```
pip install .
```

This installs the `tasky` command. `tasky --version` prints the version.

## Database location

By default the database is `tasky.db` inside the `tasky` folder of your
platform's user data directory. To use a different file, set the
`TASKY_DB_PATH` environment variable.

Every command opens the database first, creating the file and its table if
they are missing. Because of that, a plain `tasky init` reports that the
database already exists; `--force` deletes it and creates a fresh, empty one
(if the file cannot be deleted, it is moved aside to a `.db.backup` file
first):

```
tasky init --force
```

Show where the database is, its size, and how many tasks it holds:

```
tasky db-info
```

## Adding and editing tasks

```
tasky add "Write report" -d "Quarterly numbers" -p high --due 2024-12-31
tasky edit 3 --title "Write final report" --due +2
```

Titles may not be empty and are limited to 200 bytes of UTF-8; descriptions
to 1000 bytes. Leading and trailing spaces are trimmed.

A priority can be `low`, `medium` or `high`. The Korean names `낮음`, `보통`
and `높음`, and the single letters `l`, `m` and `h`, also work. The default
is `medium`.

A due date can be given in any of these forms, and is taken as midnight in
your local time zone:

- `YYYY-MM-DD`
- `YYYY/MM/DD`
- `YYYY.MM.DD`
- `MM/DD/YYYY`
- `DD/MM/YYYY`
- `Dec 31, 2024`
- `31 Dec 2024`
- `December 31, 2024`
- `31 December 2024`

It can also be a number of days relative to today: `+3` means three days from
now and `-1` means yesterday.

## Listing tasks

```
tasky list
tasky list -s pending -p high --sort due --order asc
tasky list --today
tasky list --overdue
tasky list --urgent
tasky list -v
```

- Status filter: `pending` or `done` (also `대기`/`완료`, `p`/`d`).
- Sort keys: `created` (the default), `updated`, `due`, `priority` and
  `title`.
- Order: `asc`, or `desc` (the default); any other value means `desc`.
- `--today` shows tasks due today, `--overdue` pending tasks due before
  today, and `--urgent` pending tasks with high priority; these three ignore
  the filter and sort options.
- `-v` prints each task in full instead of as a table.

## Other commands

```
tasky show 3
tasky done 3 4 5
tasky undone 3
tasky remove 3
tasky stats
```

`done` completes each id it is given and lists the ones that failed. `stats`
shows totals, the number of high-priority and overdue tasks, and a completion
bar.

## Using it from Python

```python
from tasky.service import TodoService
from tasky.models import CreateTodo, Priority

with TodoService.in_memory() as service:
    todo = service.create_todo(CreateTodo("Buy milk", priority=Priority.HIGH))
    service.complete_todo(todo.id)
    print(service.get_stats().completion_rate)
```

`TodoService.open_default()` works against the same database the command
uses. Errors are raised as subclasses of `tasky.errors.TaskyError`, such as
`TodoNotFoundError`, `EmptyTitleError` and `InvalidDateFormatError`.