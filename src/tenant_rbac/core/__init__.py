"""Core building blocks shared by all tenant-rbac features."""
