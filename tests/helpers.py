import io


class StubKms:
    """Stands in for a boto3 kms client and counts decrypt calls."""
    def __init__(self, plaintext=b"Pretend that this is decrypted please", error=None):
        self.plaintext = plaintext
        self.error = error
        self.calls = []

    def decrypt(self, CiphertextBlob):
        self.calls.append(CiphertextBlob)
        if self.error is not None:
            raise self.error
        return {"Plaintext": self.plaintext}


class StubS3:
    """Stands in for a boto3 s3 client serving a fixed set of objects."""
    def __init__(self, objects):
        self.objects = objects
        self.calls = []

    def get_object(self, Bucket, Key):
        self.calls.append((Bucket, Key))
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}
