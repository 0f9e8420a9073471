from taskboard.config import STORAGE_KEY
from taskboard.database import KeyValueStorage
from taskboard.store import TaskStore

# Tables are created by KeyValueStorage if missing
storage = KeyValueStorage()

if storage.get_item(STORAGE_KEY) is None:
    print("No saved tasks; the board already starts from the example tasks")
else:
    store = TaskStore(storage, STORAGE_KEY)
    store.reset()
    print(f"Tasks reset to {store.count()} example tasks")
