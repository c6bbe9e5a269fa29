from atlas_provider_sqlalchemy.ddl import print_ddl

from . import sql

print_ddl(
    "postgresql",
    [
        sql.GuildSettings,
        sql.Ticket,
        sql.ErrorLog,
    ],
)
