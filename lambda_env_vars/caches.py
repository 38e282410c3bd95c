"""Process lifetime caches.

Lambda keeps a container warm between invocations, and anything held at
module level survives until the container is retired. The two caches
here exploit that: each decrypted variable and each fetched document is
paid for once per container.

Entries are never evicted or refreshed. Writes are not locked; two
threads racing on the same key store the same value.

"""

from typing import Any
from typing import Dict
from typing import Optional
from typing import Tuple

Document = Dict[str, Any]
DocumentKey = Tuple[str, str, str]


class DecryptedVariableCache:
    """Variable name to decrypted plaintext."""
    def __init__(self):
        self.values: Dict[str, str] = {}

    def __contains__(self, name):
        return name in self.values

    def __len__(self):
        return len(self.values)

    def get(self, name: str) -> Optional[str]:
        return self.values.get(name)

    def set(self, name: str, value):
        self.values[name] = value
        return value


class DocumentCache:
    """(bucket name, bucket region, file name) to a parsed document."""
    def __init__(self):
        self.documents: Dict[DocumentKey, Document] = {}

    def __contains__(self, key):
        return key in self.documents

    def __len__(self):
        return len(self.documents)

    def get(self, key: DocumentKey) -> Optional[Document]:
        return self.documents.get(key)

    def set(self, key: DocumentKey, document: Document) -> Document:
        self.documents[key] = document
        return document


decrypted_variables = DecryptedVariableCache()
documents = DocumentCache()
