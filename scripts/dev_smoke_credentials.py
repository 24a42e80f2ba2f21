# dev_smoke_credentials.py
# -- integration check for the credential store in storage.py

import os

from tourney_client.storage import CredentialStore

DB = "smoke_tourney.db"


def main():
    if os.path.exists(DB):
        os.remove(DB)

    print("--- credential store cases ---")

    # case 1: fresh database reads as anonymous
    store = CredentialStore(DB)
    print("case 1: fresh database:", store.get())

    # case 2: token survives a new store instance (process restart)
    store.set("tok-smoke-1")
    print("case 2: after restart:", CredentialStore(DB).get())

    # case 3: overwrite keeps a single token
    store.set("tok-smoke-2")
    print("case 3: overwrite:", CredentialStore(DB).get())

    # case 4: clear, then restart
    store.clear()
    print("case 4: cleared, after restart:", CredentialStore(DB).get())


if __name__ == "__main__":
    main()
