"""Domain errors."""


class EnquiryNotFoundError(LookupError):
    def __init__(self, enquiry_id: str):
        super().__init__(f"Enquiry not found: {enquiry_id}")
        self.enquiry_id = enquiry_id
