# caskapi

caskapi is a small HTTP API service for cask warehouse listings. It is a
plain WSGI application built on the standard library alone.

## Endpoints

| Method | Path          | Behaviour                                                                 |
|--------|---------------|---------------------------------------------------------------------------|
| GET    | `/warehouses` | `200 OK` when the `warehouses-get` flag is enabled, otherwise `501 Not Implemented` |
| GET    | `/health`     | `200 OK`, empty body                                                      |
| GET    | `/probe`      | `200 OK`, empty body                                                      |
| GET    | any other path | Answered like `/probe`                                                   |

`HEAD` is accepted wherever `GET` is. Any other method gets
`405 Method Not Allowed` with `Allow: GET, HEAD`.

Every response carries an `X-Request-Id` header: the value of the incoming
`X-Request-Id` header if there is one, otherwise a fresh random id. If a
handler raises, the error is logged and the client gets
`500 Internal Server Error`.

### CORS

Requests that carry an `Origin` header get `Access-Control-Allow-Origin` set
to that origin and `Vary: Origin`. Any origin is allowed. A preflight
(`OPTIONS` with `Access-Control-Request-Method`) is answered with
`204 No Content`; when the requested method is one of `GET`, `POST`, `PUT`,
`DELETE`, `OPTIONS` or `PATCH`, the response lists those methods and the
allowed request headers `x-agent-id`, `x-company-id`, `x-project-id`,
`x-environment-id`, `x-user-subject` and `x-flags-timestamp`.

## Running

```
pip install .
caskapi
```

`caskapi --version` prints the service name, version and build.

The service reads its settings from the environment when it starts:

| Variable               | Default         | Meaning                                            |
|------------------------|-----------------|----------------------------------------------------|
| `DEVELOPMENT`          | `false`         | Development mode                                   |
| `HTTP_PORT`            | `80`            | Port to listen on                                  |
| `PORT`                 | `3000`          | Port to listen on instead when `ON_RAILWAY` is true |
| `ON_RAILWAY`           | `false`         | Use `PORT` in place of `HTTP_PORT`                 |
| `CLERK_KEY`            | empty           | Key handed to the user lookup of `UserValidator`   |
| `STRIPE_SECRET`        | built-in placeholder | Payment provider key, kept in the project properties |
| `FLAGS_PROJECT_ID`     | `flags-gg`      | Feature-flag project                               |
| `FLAGS_AGENT_ID`       | `orchestrator`  | Feature-flag agent                                 |
| `FLAGS_ENVIRONMENT_ID` | `orchestrator`  | Feature-flag environment                           |

Booleans accept `1`, `t`, `T`, `true`, `TRUE`, `True` and their false
counterparts (`0`, `f`, `F`, `false`, `FALSE`, `False`). An unparsable value
makes `load_config` raise `caskapi.config.ConfigError`, and the command exits
with status 1. The same happens if `PORT` is not a whole number while
`ON_RAILWAY` is true.

The server listens on all interfaces and runs until interrupted.

## Using it as a library

```python
from caskapi.config import load_config
from caskapi.service import Service

service = Service(load_config(), flags_fetch=lambda client: {"warehouses-get": True})
print(service.resolve_port())
service.start()
```

- `caskapi.config.load_config(environ)` and `build_project_properties(environ)`
  read a mapping of environment variables (`os.environ` when none is given)
  into a `Config` with a `LocalConfig`, a `clerk_key` and `project_properties`.
- `caskapi.service.Service.app` is a WSGI callable, so any WSGI server can
  host it in place of `Service.start`. `CorsMiddleware` can wrap other WSGI
  applications too.
- `caskapi.warehouse.FlagsClient` answers `is_enabled(name)` from the mapping
  returned by its `fetch` callable; `WarehouseSystem.get_warehouses` is the
  `/warehouses` handler.
- `caskapi.auth.UserValidator(config, lookup).wrap(app)` wraps a WSGI
  application so that only requests whose `x-user-subject` header names a
  user reach it. `lookup(api_key, subject)` returns the user or `None`; a
  lookup that raises counts as no user. In development mode every request is
  accepted. Rejected requests get an empty `200 OK`.

## What it does not do

- caskapi does not talk to a feature-flag service itself. Flag states come
  from the `flags_fetch` callable given to `Service`; without one every flag
  is off, so the `caskapi` command answers `/warehouses` with
  `501 Not Implemented`.
- It has no user directory client. `UserValidator` needs a `lookup` callable,
  and `Service` does not apply it; wrap `Service.app` yourself to require
  users.
- There is no storage and no warehouse data: `/warehouses` returns an empty
  body in every case.

## Tests

```
pip install ".[test]"
pytest
```