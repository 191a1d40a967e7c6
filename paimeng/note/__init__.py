"""Timed reminders: time-phrase parsing, cron schedules, storage and display."""