# paimeng

Building blocks for a QQ/OneBot chat bot. These are the parts of the bot
that do real work. Connecting to a chat server is left to you.

## Modules

- `paimeng.textutil`: string helpers. `string_limit`, `merge_string_slices`,
  `delete_strings`, `split_on_space`, `is_letter`, `is_number` and
  `json_string`. There is also `go_and_wait`, which runs callables in
  threads and re-raises the first error.
- `paimeng.message`: `MessageSegment` and its CQ-code text form.
  `text_segment`, `image_segment` and `at_segment` build segments.
  `parse_message` and `message_to_string` convert between segments and
  CQ-code text. `extract_plain_text` and `image_urls` read a message.
- `paimeng.httpclient`: `HttpClient` wraps `requests`. It keeps shared
  headers and cookies, retries on connection errors `try_time` times, parses
  JSON bodies (`get_json`, `post_json`) and downloads to a file
  (`download_to_file`).
- `paimeng.push`: `Target` sends one message to friends and groups through
  any object that fits the `Bot` protocol. Unless `do_not_check` is set, it
  keeps only the ids the bot actually has. It drops "@" mentions from private
  messages, and drops "@all" in a group that has no quota left for it.
- `paimeng.note`: timed reminders.
  - `note.parse.RemindTask.parse_cn_time` understands Chinese phrases such as
    `每天23点`, `后天8点20`, `周六14点`, `120分钟后` and `每月16号20:30`.
    `parse_spec_time` takes five-field cron expressions. A time in the past
    raises `AlreadyPassedError`. Text that matches no known phrase raises
    `NoMatchError`.
  - `note.cron` parses cron expressions (`parse_standard`) and duration
    strings (`parse_duration`, `format_duration`).
  - `note.schedule.gen_schedule` turns a task into a schedule. Its `next(t)`
    gives the next firing time.
  - `note.store.NoteStore` keeps tasks in SQLite, in memory or in a file.
    `clean_illegal` deletes tasks that can no longer fire. `job_target`
    builds the `Target` that delivers a reminder.
  - `note.display` formats the task listing shown to users
    (`describe_task`) and splits a "<time>提醒<target><content>" request
    (`split_note_request`).
- `paimeng.pixiv.picture`: `PictureInfo`, with its caption and R-18 check.
  It also covers reverse-proxy URL rewriting, the Lolicon API request body
  and response parsing, and the parsing of picture counts (`cmd_num`) and
  timeouts.
- `paimeng.pixiv.hibi`: builds HibiAPI illustration URLs (`illust_url`) and
  reads illustration records (`parse_illust`, `parse_illust_pages`).
- `paimeng.anime`: builds the trace.moe and SauceNAO search URLs and formats
  their responses into reply messages.
- `paimeng.randomizer`: `random_number("1...10")` gives a number in that
  range. `random_item("a b c")` picks one of the options.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from paimeng.textutil import string_limit, split_on_space, merge_string_slices

string_limit("你好世界", 2)                      # '你好...'
split_on_space("a  b")                           # ['a', '  ', 'b']
merge_string_slices(["a", "", "b"], ["a", "c"])  # ['a', 'b', 'c']
```

```python
from paimeng.pixiv.picture import cmd_num
from paimeng.pixiv.hibi import illust_url

cmd_num("三")                        # 3
illust_url("api.obfs.dev", 123)      # 'https://api.obfs.dev/api/pixiv/illust?id=123'
```

```python
from paimeng.anime import format_similarity, format_time
from paimeng.randomizer import parse_range

format_similarity(0.9234, 100)   # '92.34%'
format_time(125.7)               # '02:05'
parse_range("10...1")            # (1, 10)
```

### Reminders

```python
from datetime import datetime
from paimeng.note.parse import RemindTask
from paimeng.note.schedule import gen_schedule

task = RemindTask(user_id=1)
task.parse_cn_time("每天23点")
task.spec                                          # '0 23 * * *'
gen_schedule(task).next(datetime(2024, 1, 1, 12))  # datetime(2024, 1, 1, 23, 0)
```

## What the package does not do

- It does not connect to a chat server or receive events. You need a bot
  object with the methods of `paimeng.push.Bot` to send anything.
- It has no command-line program and no running scheduler. `NoteStore` keeps
  reminders and `gen_schedule` says when they are due, but firing them on
  time is up to the caller.
- It does not translate text, resolve short links or fetch Pixiv ranking
  lists.
- It has no log formatter of its own and no helpers for the local file
  system.